"""Shared test fixtures and configuration."""

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from marketlock.config import RestrictionConfig
from marketlock.context import RestrictionContext
from marketlock.evaluator import MS_PER_DAY
from marketlock.store import RestrictionStore

# 2025-02-07 00:00:00 UTC
T0 = 1738886400000


class FakeClock:
    """Settable clock returning milliseconds since epoch."""

    def __init__(self, now: int = T0) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "restrictedProfiles.json"


@pytest.fixture
def store(store_path: Path) -> RestrictionStore:
    return RestrictionStore(store_path)


@pytest.fixture
def make_context(
    store: RestrictionStore, clock: FakeClock
) -> Callable[..., RestrictionContext]:
    """Build a context over the temp store with a pinned clock."""

    def _make(
        enabled: bool = True, duration_in_days: float = 3, restricted_level: int = 15
    ) -> RestrictionContext:
        config = RestrictionConfig(
            enabled=enabled,
            duration_in_days=duration_in_days,
            restricted_level=restricted_level,
        )
        return RestrictionContext(config=config, store=store, clock=clock)

    return _make


@pytest.fixture
def ctx(make_context: Callable[..., RestrictionContext]) -> RestrictionContext:
    return make_context()


@pytest.fixture
def profiles_dir(tmp_path: Path) -> Path:
    path = tmp_path / "profiles"
    path.mkdir()
    return path


@pytest.fixture
def write_profile(profiles_dir: Path) -> Callable[[str, object], Path]:
    """Write a minimal profile file with the given RegistrationDate."""

    def _write(profile_id: str, registration_date: object) -> Path:
        data = {"characters": {"pmc": {"Info": {"RegistrationDate": registration_date}}}}
        path = profiles_dir / f"{profile_id}.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def registered_days_ago(clock: FakeClock) -> Callable[[float], int]:
    """Registration date (seconds) for a profile ``days`` old at the clock's now."""

    def _date(days: float) -> int:
        return int((clock.now - days * MS_PER_DAY) / 1000)

    return _date
