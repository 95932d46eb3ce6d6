"""Process-wide marketplace level cap."""

import logging
from dataclasses import dataclass

from marketlock.config import RestrictionConfig

logger = logging.getLogger(__name__)

# Unreachable in normal play: effectively locks the marketplace.
LOCKED_OUT_LEVEL = 99


def effective_min_level(config: RestrictionConfig, session_restricted: bool) -> int:
    """Minimum level required to use the marketplace."""
    if config.enabled and session_restricted:
        return LOCKED_OUT_LEVEL
    return config.restricted_level


@dataclass
class LevelCap:
    """The single minimum-level setting the host reads."""

    min_user_level: int = 0

    def apply(self, level: int) -> None:
        if level != self.min_user_level:
            logger.debug("Marketplace level cap %d -> %d", self.min_user_level, level)
        self.min_user_level = level
