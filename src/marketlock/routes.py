"""Launcher URL routing onto the lifecycle hooks.

The host calls ``dispatch`` for each launcher request it handles. The hook's
result never replaces the host's response: ``output`` is returned unchanged.
"""

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from marketlock.context import RestrictionContext
from marketlock.hooks import on_profile_created, on_profile_wiped, on_session_check

logger = logging.getLogger(__name__)

T = TypeVar("T")

RouteHandler = Callable[[RestrictionContext, str], Any]

ROUTES: dict[str, RouteHandler] = {
    "/launcher/profile/info": on_session_check,
    "/launcher/profile/register": on_profile_created,
    "/launcher/profile/change/wipe": on_profile_wiped,
}


def dispatch(ctx: RestrictionContext, url: str, session_id: str, output: T) -> T:
    """Run the hook registered for ``url``, then hand back the host's output.

    Args:
        ctx: Restriction context.
        url: Launcher request path.
        session_id: Session / profile id the request belongs to.
        output: The host's response, passed through untouched.

    Returns:
        ``output``.
    """
    handler = ROUTES.get(url)
    if handler is None:
        logger.debug("No restriction hook for %s", url)
        return output

    handler(ctx, session_id)
    return output
