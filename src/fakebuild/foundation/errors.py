"""Fakebuild Error System.

Provides structured error handling with:
- Numeric error codes for programmatic handling
- User-friendly messages
- Recovery hints shown by the CLI
- Context for debugging
"""


from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Numeric error codes organized by category.

    Format: XYYY where X = category, YYY = specific error

    Categories:
        5xxx - Configuration errors
        6xxx - Runtime errors
        7xxx - IO errors
    """

    # 5xxx - Configuration Errors
    CONFIG_INVALID = 5001
    CONFIG_PARSE_ERROR = 5002
    CONFIG_ENV_INVALID = 5003
    FRAMEWORK_UNSUPPORTED = 5004

    # 6xxx - Runtime Errors
    RUNTIME_STATE_INVALID = 6001

    # 7xxx - IO Errors
    FILE_NOT_FOUND = 7001

    @property
    def category(self) -> str:
        """Get the error category name."""
        prefix = self.value // 1000
        return {
            5: "config",
            6: "runtime",
            7: "io",
        }.get(prefix, "unknown")


# Human-readable error messages
ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.CONFIG_INVALID: "Invalid configuration for '{key}': {detail}",
    ErrorCode.CONFIG_PARSE_ERROR: "Failed to parse config file '{path}': {detail}",
    ErrorCode.CONFIG_ENV_INVALID: "Environment variable '{var}' is invalid: {detail}",
    ErrorCode.FRAMEWORK_UNSUPPORTED: "Invalid framework. Please use one of: {choices}",
    ErrorCode.RUNTIME_STATE_INVALID: "Invalid runtime state: {detail}",
    ErrorCode.FILE_NOT_FOUND: "File not found: {path}",
}


RECOVERY_HINTS: dict[ErrorCode, list[str]] = {
    ErrorCode.FRAMEWORK_UNSUPPORTED: [
        "Pass one of the supported values with --framework (e.g. --framework vue)",
        "Omit --framework to simulate a react build",
    ],
    ErrorCode.CONFIG_INVALID: [
        "Check the value of '{key}' in your config file",
        "Remove the key to fall back to the built-in default",
    ],
    ErrorCode.CONFIG_PARSE_ERROR: [
        "Make sure '{path}' is valid YAML with a mapping at the top level",
    ],
    ErrorCode.CONFIG_ENV_INVALID: [
        "Fix or unset the variable: unset {var}",
    ],
    ErrorCode.FILE_NOT_FOUND: [
        "Check the path passed to --config",
    ],
}


class FakebuildError(Exception):
    """Base error type for all fakebuild errors.

    Example:
        >>> err = FakebuildError(
        ...     code=ErrorCode.FRAMEWORK_UNSUPPORTED,
        ...     context={"framework": "ember", "choices": "react, vue"},
        ... )
        >>> print(err)
        [FB-5004] Invalid framework. Please use one of: react, vue
    """

    def __init__(
        self,
        code: ErrorCode,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        self.code = code
        self.context = context or {}
        self.cause = cause
        super().__init__(str(self))

    @property
    def message(self) -> str:
        """Get the formatted user-friendly message."""
        template = ERROR_MESSAGES.get(self.code, "An error occurred: {detail}")
        try:
            return template.format(**self.context)
        except KeyError:
            # Fallback if context doesn't have all keys
            return template

    @property
    def recovery_hints(self) -> list[str]:
        """Get recovery suggestions for this error."""
        formatted = []
        for hint in RECOVERY_HINTS.get(self.code, []):
            try:
                formatted.append(hint.format(**self.context))
            except KeyError:
                formatted.append(hint)
        return formatted

    @property
    def category(self) -> str:
        """Get the error category."""
        return self.code.category

    @property
    def error_id(self) -> str:
        """Get the error ID string (e.g., 'FB-5004')."""
        return f"FB-{self.code.value}"

    def __str__(self) -> str:
        return f"[{self.error_id}] {self.message}"

    def __repr__(self) -> str:
        return f"FakebuildError(code={self.code!r}, context={self.context!r})"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dict for logging and JSON output."""
        return {
            "error_id": self.error_id,
            "code": self.code.value,
            "category": self.category,
            "message": self.message,
            "recovery_hints": self.recovery_hints,
            "context": self.context,
        }


# Convenience factory functions

def config_error(
    code: ErrorCode,
    key: str = "",
    detail: str = "",
    path: str = "",
    var: str = "",
    cause: Exception | None = None,
) -> FakebuildError:
    """Create a configuration error."""
    return FakebuildError(
        code=code,
        context={"key": key, "detail": detail, "path": path, "var": var},
        cause=cause,
    )


def unsupported_framework(framework: str, choices: list[str]) -> FakebuildError:
    """Create a FRAMEWORK_UNSUPPORTED error."""
    return FakebuildError(
        code=ErrorCode.FRAMEWORK_UNSUPPORTED,
        context={"framework": framework, "choices": ", ".join(choices)},
    )
