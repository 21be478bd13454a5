"""Fabricated file names, ids and words for the simulated build output."""

import string

from fakebuild.simulator.randomness import RandomSource

WORDS = (
    "array", "async", "bandwidth", "buffer", "bus", "cache", "capacitor",
    "circuit", "client", "cluster", "component", "config", "context",
    "driver", "engine", "feed", "firewall", "frame", "gateway", "handler",
    "hook", "index", "interface", "kernel", "layout", "matrix", "middleware",
    "module", "monitor", "network", "node", "panel", "parser", "pixel",
    "pipeline", "port", "program", "protocol", "proxy", "query", "reducer",
    "render", "router", "schema", "selector", "sensor", "service", "session",
    "store", "stream", "system", "template", "token", "transmitter", "widget",
)

FILE_EXTENSIONS = (
    "js", "jsx", "ts", "tsx", "mjs", "cjs", "vue", "svelte", "css", "scss",
    "json", "html", "map", "svg", "png", "woff2",
)

_ALPHANUMERIC = string.ascii_lowercase + string.digits


class FakeData:
    """Generates throwaway values from an injected random source."""

    def __init__(self, rng: RandomSource):
        self.rng = rng

    def word(self) -> str:
        return self.rng.choice(WORDS)

    def words(self, count: int = 3) -> str:
        """Space-separated words, e.g. "router cache pixel"."""
        return " ".join(self.word() for _ in range(count))

    def file_name(self) -> str:
        """File name like "proxy_widget.tsx"."""
        return f"{self.word()}_{self.word()}.{self.rng.choice(FILE_EXTENSIONS)}"

    def alphanumeric(self, length: int = 8) -> str:
        """Lowercase letters and digits, used as fake hashes/ids."""
        return "".join(self.rng.choice(_ALPHANUMERIC) for _ in range(length))

    def number(self, low: int, high: int) -> int:
        """Integer in [low, high], both inclusive."""
        return self.rng.randint(low, high)

    def boolean(self) -> bool:
        return self.rng.random() < 0.5
