"""Synchronous cache invalidation after committed mutations."""

import logging
from collections.abc import Iterable

from portalauthz.application.ports import PermissionCache

logger = logging.getLogger(__name__)


def invalidate_users(cache: PermissionCache | None, user_ids: Iterable[str]) -> None:
    if cache is None:
        return
    affected = sorted(set(user_ids))
    for user_id in affected:
        cache.invalidate_user(user_id)
    if affected:
        logger.debug("Invalidated cached permissions for %d user(s)", len(affected))
