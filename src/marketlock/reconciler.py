"""Startup reconciliation of the restriction table.

Brings the persisted table in line with the known profiles and the current
time:

1. Every profile younger than the restriction duration gets an entry if it has
   none. Older profiles are skipped; an entry they already have is left alone.
2. Every entry in the table (including ids with no profile file, e.g. from
   earlier wipes) is evaluated; expired ones are dropped.
3. The table is saved once.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from marketlock.context import RestrictionContext
from marketlock.evaluator import new_entry, remove_expired
from marketlock.profiles import ProfileRecord

logger = logging.getLogger(__name__)


@dataclass
class ReconcileReport:
    """What one reconciliation pass did."""

    added: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    expired: list[str] = field(default_factory=list)
    active: dict[str, int] = field(default_factory=dict)  # id -> remaining ms

    def summary(self) -> str:
        return (
            f"{len(self.added)} added, {len(self.skipped)} skipped, "
            f"{len(self.expired)} expired, {len(self.active)} active"
        )


def reconcile(
    ctx: RestrictionContext, profiles: Iterable[ProfileRecord]
) -> ReconcileReport:
    """Run one reconciliation pass and persist the result.

    Args:
        ctx: Restriction context (config, store, clock).
        profiles: Profile records to scan. Materialized before the store is
            touched, so an enumeration failure leaves the table as it was.

    Returns:
        ReconcileReport describing the changes.
    """
    records = list(profiles)
    config = ctx.config
    now = ctx.now()
    report = ReconcileReport()

    with ctx.store.lock:
        table = dict(ctx.store.load())

        for record in records:
            if record.age_in_days(now) > config.duration_in_days:
                logger.info(
                    "Profile %s is older than %s days. No temporary restriction applied.",
                    record.profile_id,
                    config.duration_in_days,
                )
                report.skipped.append(record.profile_id)
                continue

            if record.profile_id not in table:
                table[record.profile_id] = new_entry(now, config.duration_in_days)
                logger.info("Added restriction for profile: %s", record.profile_id)
                report.added.append(record.profile_id)

        table, evaluations = remove_expired(table, now)
        for result in evaluations:
            if result.expired:
                logger.info("Restriction expired for profile: %s", result.profile_id)
                report.expired.append(result.profile_id)
            else:
                hours, minutes = result.remaining
                logger.info(
                    "Profile %s restricted. Time remaining: %d hours and %d minutes.",
                    result.profile_id,
                    hours,
                    minutes,
                )
                report.active[result.profile_id] = result.remaining_ms

        ctx.store.save(table)

    logger.info("Reconciliation finished: %s", report.summary())
    return report
