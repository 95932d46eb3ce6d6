"""Read-only access to persisted player profiles.

Profiles live as ``<profileId>.json`` files in one directory. Only the
registration date is read: ``characters.pmc.Info.RegistrationDate``, in
seconds since epoch.
"""

import json
import logging
import math
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class ProfileEnumerationError(RuntimeError):
    """Raised when the profiles directory itself cannot be listed."""


class ProfileRecord(BaseModel):
    """A persisted profile, reduced to what account age needs."""

    profile_id: str
    registration_date: int  # seconds since epoch

    def age_in_days(self, now: int) -> float:
        """Account age at ``now`` (ms since epoch)."""
        return (now / 1000 - self.registration_date) / (60 * 60 * 24)


def _registration_date(data: Any) -> int | None:
    try:
        value = data["characters"]["pmc"]["Info"]["RegistrationDate"]
    except (KeyError, TypeError):
        return None
    # bool is an int subclass; it is never a valid date
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    # json accepts NaN and Infinity
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return int(value)


class ProfileSource:
    """Enumerates profile records from a directory of JSON files."""

    def __init__(self, profiles_dir: Path) -> None:
        self.profiles_dir = Path(profiles_dir)

    def list_files(self) -> list[Path]:
        """All profile files, sorted by name.

        Raises:
            ProfileEnumerationError: If the directory is missing or unreadable.
        """
        try:
            return sorted(p for p in self.profiles_dir.iterdir() if p.suffix == ".json")
        except OSError as e:
            raise ProfileEnumerationError(
                f"Cannot list profiles in {self.profiles_dir}: {e}"
            ) from e

    def read(self, path: Path) -> ProfileRecord | None:
        """Read one profile file. Returns None (and logs) if it is unusable."""
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("Skipping unreadable profile %s: %s", path.name, e)
            return None

        registration_date = _registration_date(data)
        if registration_date is None:
            logger.warning("Skipping profile %s: no registration date", path.stem)
            return None

        return ProfileRecord(profile_id=path.stem, registration_date=registration_date)

    def iter_profiles(self) -> Iterator[ProfileRecord]:
        """Yield every usable profile record.

        The directory is listed on first iteration, so an enumeration failure
        raises before any record is produced.
        """
        for path in self.list_files():
            record = self.read(path)
            if record is not None:
                yield record
