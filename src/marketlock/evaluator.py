"""Restriction evaluation against the current time.

Every expiry decision goes through ``evaluate``; nothing else compares a
``restricted_until`` timestamp with "now".
"""

from dataclasses import dataclass, field

from marketlock.store import RestrictionEntry, RestrictionTable

MS_PER_MINUTE = 60 * 1000
MS_PER_HOUR = 60 * MS_PER_MINUTE
MS_PER_DAY = 24 * MS_PER_HOUR


@dataclass(frozen=True)
class Evaluation:
    """Outcome of evaluating one profile.

    ``table`` is the table the caller should continue with. When ``expired`` is
    set it is a copy without the profile's entry and must be saved; otherwise it
    is the input table unchanged.
    """

    profile_id: str
    restricted: bool
    remaining_ms: int
    expired: bool = False
    table: RestrictionTable = field(default_factory=dict, repr=False, compare=False)

    @property
    def remaining(self) -> tuple[int, int]:
        """Remaining time as (hours, minutes)."""
        return split_remaining(self.remaining_ms)


def split_remaining(remaining_ms: int) -> tuple[int, int]:
    """Split milliseconds into whole hours and leftover whole minutes."""
    hours = remaining_ms // MS_PER_HOUR
    minutes = (remaining_ms % MS_PER_HOUR) // MS_PER_MINUTE
    return hours, minutes


def restriction_deadline(now: int, duration_in_days: float) -> int:
    """Timestamp (ms) at which a restriction created at ``now`` lifts."""
    return now + int(duration_in_days * MS_PER_DAY)


def new_entry(now: int, duration_in_days: float) -> RestrictionEntry:
    """Entry for a profile restricted starting at ``now``."""
    return RestrictionEntry(restricted_until=restriction_deadline(now, duration_in_days))


def evaluate(table: RestrictionTable, profile_id: str, now: int) -> Evaluation:
    """Decide whether ``profile_id`` is restricted at ``now``.

    The input table is never modified. An expired entry is reported through
    ``Evaluation.expired`` with a trimmed copy of the table.
    """
    entry = table.get(profile_id)
    if entry is None:
        return Evaluation(profile_id, restricted=False, remaining_ms=0, table=table)

    remaining_ms = entry.restricted_until - now
    if remaining_ms > 0:
        return Evaluation(
            profile_id, restricted=True, remaining_ms=remaining_ms, table=table
        )

    trimmed = {pid: e for pid, e in table.items() if pid != profile_id}
    return Evaluation(
        profile_id, restricted=False, remaining_ms=0, expired=True, table=trimmed
    )


def remove_expired(
    table: RestrictionTable, now: int
) -> tuple[RestrictionTable, list[Evaluation]]:
    """Evaluate every entry, dropping the expired ones.

    Returns:
        The trimmed table and one Evaluation per entry (expired or not), in
        table order.
    """
    evaluations = []
    for profile_id in list(table):
        result = evaluate(table, profile_id, now)
        table = result.table
        evaluations.append(result)
    return table, evaluations
