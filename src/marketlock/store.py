"""Restriction table storage.

The table is a single JSON object mapping profile id to
``{"restrictedUntil": <ms since epoch>}``. It is always read and written
whole: callers load, mutate a copy, and save the full table back.
"""

import json
import logging
import threading
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


class RestrictionEntry(BaseModel):
    """When a profile's marketplace restriction lifts."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    restricted_until: int = Field(alias="restrictedUntil", strict=True)


RestrictionTable = dict[str, RestrictionEntry]


def parse_table(data: object) -> RestrictionTable:
    """Build a table from decoded JSON, dropping entries of the wrong shape."""
    if not isinstance(data, dict):
        logger.warning(
            "Restriction table is a %s, not an object; treating as empty",
            type(data).__name__,
        )
        return {}

    table: RestrictionTable = {}
    for profile_id, raw in data.items():
        try:
            table[profile_id] = RestrictionEntry.model_validate(raw)
        except ValidationError as e:
            logger.warning("Dropping malformed restriction for %s: %s", profile_id, e)
    return table


def dump_table(table: RestrictionTable) -> str:
    """Serialize a table the way it is stored on disk."""
    payload = {
        profile_id: entry.model_dump(by_alias=True)
        for profile_id, entry in table.items()
    }
    return json.dumps(payload, indent=4)


class RestrictionStore:
    """File-backed restriction table.

    Single-writer: the file is assumed to belong to this process. ``lock``
    serializes load-mutate-save sequences between in-process callers.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self.lock = threading.Lock()

    def load(self) -> RestrictionTable:
        """Read the persisted table.

        Returns an empty table when the file is missing or unreadable; never
        raises.
        """
        if not self.path.exists():
            return {}

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("Failed to load restriction table from %s: %s", self.path, e)
            return {}

        return parse_table(data)

    def save(self, table: RestrictionTable) -> None:
        """Replace the persisted table. Write failures are logged, not raised."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(dump_table(table), encoding="utf-8")
        except OSError as e:
            logger.error("Failed to save restriction table to %s: %s", self.path, e)
            return

        logger.debug("Saved %d restrictions to %s", len(table), self.path)
