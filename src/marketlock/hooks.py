"""Lifecycle hooks invoked by the host.

- ``on_session_check``: every profile-info request; reads and expires entries,
  sets the level cap.
- ``on_profile_created`` / ``on_profile_wiped``: restrict a fresh profile once.
- ``on_startup``: pin the level cap and reconcile the table.

Hooks that change the table hold ``ctx.store.lock`` across load, mutate and
save.
"""

import logging

from marketlock.context import RestrictionContext
from marketlock.evaluator import Evaluation, evaluate, new_entry
from marketlock.policy import effective_min_level
from marketlock.profiles import ProfileEnumerationError, ProfileSource
from marketlock.reconciler import ReconcileReport, reconcile

logger = logging.getLogger(__name__)


def on_session_check(ctx: RestrictionContext, session_id: str) -> Evaluation:
    """Evaluate a session and set the level cap accordingly.

    Never creates entries. An expired entry is removed and the table saved.
    With restrictions disabled the level cap is left untouched.
    """
    with ctx.store.lock:
        result = evaluate(ctx.store.load(), session_id, ctx.now())
        if result.expired:
            ctx.store.save(result.table)

    if result.restricted:
        hours, minutes = result.remaining
        logger.info(
            "Profile %s is flea restricted. Time until unlock: %d hours and %d minutes.",
            session_id,
            hours,
            minutes,
        )
    elif result.expired:
        logger.info("Restriction expired for session: %s", session_id)

    # Disabled: the cap was pinned at startup and stays there.
    if ctx.config.enabled:
        ctx.level_cap.apply(effective_min_level(ctx.config, result.restricted))
    return result


def _restrict_new(ctx: RestrictionContext, profile_id: str) -> bool:
    with ctx.store.lock:
        table = ctx.store.load()
        if profile_id in table:
            logger.info("Profile already restricted. Profile ID: %s", profile_id)
            return False

        table = dict(table)
        table[profile_id] = new_entry(ctx.now(), ctx.config.duration_in_days)
        ctx.store.save(table)
    return True


def on_profile_created(ctx: RestrictionContext, profile_id: str) -> bool:
    """Restrict a freshly registered profile.

    Returns:
        True if a restriction was created, False if one already existed.
    """
    created = _restrict_new(ctx, profile_id)
    if created:
        logger.info(
            "Freshly created profile was flea market restricted. Profile ID: %s",
            profile_id,
        )
    return created


def on_profile_wiped(ctx: RestrictionContext, profile_id: str) -> bool:
    """Restrict a wiped profile, exactly as if it were new."""
    created = _restrict_new(ctx, profile_id)
    if created:
        logger.info(
            "Profile was wiped and flea market restricted. Profile ID: %s", profile_id
        )
    return created


def on_startup(
    ctx: RestrictionContext, profiles: ProfileSource
) -> ReconcileReport | None:
    """Set the baseline level cap and, when enabled, reconcile the table.

    Returns:
        The reconciliation report, or None if restrictions are disabled or the
        profiles could not be enumerated.
    """
    ctx.level_cap.apply(ctx.config.restricted_level)

    if not ctx.config.enabled:
        logger.warning(
            "Flea temporary restrictions are disabled in the config "
            "but flea market level cap was set to %d.",
            ctx.config.restricted_level,
        )
        return None

    try:
        return reconcile(ctx, profiles.iter_profiles())
    except ProfileEnumerationError as e:
        logger.error("Startup reconciliation skipped: %s", e)
        return None
