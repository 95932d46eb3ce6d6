"""Temporary marketplace restriction for new and wiped profiles."""

from marketlock.context import RestrictionContext
from marketlock.evaluator import Evaluation, evaluate
from marketlock.hooks import (
    on_profile_created,
    on_profile_wiped,
    on_session_check,
    on_startup,
)
from marketlock.store import RestrictionEntry, RestrictionStore

__all__ = [
    "Evaluation",
    "RestrictionContext",
    "RestrictionEntry",
    "RestrictionStore",
    "evaluate",
    "on_profile_created",
    "on_profile_wiped",
    "on_session_check",
    "on_startup",
]
