"""Explicit per-process state handed to every hook."""

import time
from collections.abc import Callable
from dataclasses import dataclass, field

from marketlock.config import RestrictionConfig, Settings, load_restriction_config
from marketlock.policy import LevelCap
from marketlock.store import RestrictionStore


def now_ms() -> int:
    """Current wall-clock time in milliseconds since epoch."""
    return int(time.time() * 1000)


@dataclass
class RestrictionContext:
    """Config, store, clock and level cap for one process.

    ``clock`` is injectable so tests can pin "now".
    """

    config: RestrictionConfig
    store: RestrictionStore
    level_cap: LevelCap = field(default_factory=LevelCap)
    clock: Callable[[], int] = now_ms

    @classmethod
    def from_settings(cls, settings: Settings) -> "RestrictionContext":
        """Build a context from settings, loading the config file once.

        Raises:
            ConfigError: If the config file exists but is invalid.
        """
        return cls(
            config=load_restriction_config(settings.config_path),
            store=RestrictionStore(settings.store_path),
        )

    def now(self) -> int:
        return self.clock()
