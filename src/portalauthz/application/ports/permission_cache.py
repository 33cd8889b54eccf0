"""Effective permission cache port."""

from datetime import datetime
from typing import Protocol

from portalauthz.application.dto.authorization_dto import EffectivePermissionSet


class PermissionCache(Protocol):
    """Cache of resolved permission sets with synchronous invalidation.

    ``generation`` is read before resolving and passed back to ``put`` so a
    result computed before an invalidation is never stored after it.
    """

    def get(self, user_id: str, at: datetime) -> EffectivePermissionSet | None: ...

    def generation(self, user_id: str) -> int: ...

    def put(self, result: EffectivePermissionSet, generation: int) -> None: ...

    def invalidate_user(self, user_id: str) -> None: ...
