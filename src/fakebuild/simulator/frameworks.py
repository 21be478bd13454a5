"""Supported front-end frameworks and the tools each one builds with."""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from fakebuild.foundation.errors import unsupported_framework


class FrameworkId(Enum):
    """Framework whose build is being simulated."""

    REACT = "react"
    SVELTE = "svelte"
    VUE = "vue"
    ANGULAR = "angular"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class FrameworkConfig:
    """Tool names shown while simulating one framework's build."""

    build_tool: str
    test_runner: str
    style_processor: str
    linter: str
    formatter: str


FRAMEWORK_CONFIGS: MappingProxyType[FrameworkId, FrameworkConfig] = MappingProxyType({
    FrameworkId.REACT: FrameworkConfig(
        build_tool="webpack",
        test_runner="Jest",
        style_processor="CSS-in-JS",
        linter="ESLint",
        formatter="Prettier",
    ),
    FrameworkId.SVELTE: FrameworkConfig(
        build_tool="rollup",
        test_runner="Jest",
        style_processor="SCSS",
        linter="ESLint",
        formatter="Prettier",
    ),
    FrameworkId.VUE: FrameworkConfig(
        build_tool="Vite",
        test_runner="Vitest",
        style_processor="SCSS",
        linter="ESLint",
        formatter="Prettier",
    ),
    FrameworkId.ANGULAR: FrameworkConfig(
        build_tool="Angular CLI",
        test_runner="Karma",
        style_processor="SCSS",
        linter="TSLint",
        formatter="Prettier",
    ),
})

DEFAULT_FRAMEWORK = FrameworkId.REACT


def framework_names() -> list[str]:
    """Supported framework identifiers, in declaration order."""
    return [framework.value for framework in FrameworkId]


def parse_framework(value: str) -> FrameworkId:
    """Resolve a user-supplied identifier to a FrameworkId.

    Matching is exact: "React" is rejected just like "ember".

    Raises:
        FakebuildError: FRAMEWORK_UNSUPPORTED if the value isn't a known framework.
    """
    try:
        return FrameworkId(value)
    except ValueError:
        raise unsupported_framework(value, framework_names()) from None


def get_framework_config(framework: FrameworkId) -> FrameworkConfig:
    """Look up the tool configuration for a framework."""
    return FRAMEWORK_CONFIGS[framework]
