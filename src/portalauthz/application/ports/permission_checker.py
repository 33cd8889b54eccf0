"""Permission checker port - the only authorization surface for callers."""

from collections.abc import Mapping
from typing import Protocol

from portalauthz.application.dto.authorization_dto import CheckResult


class PermissionChecker(Protocol):
    """Port for checking a user's permissions right now."""

    async def check(
        self,
        user_id: str,
        permission_id: str,
        context: Mapping[str, str] | None = None,
    ) -> CheckResult: ...

    async def record_denial(
        self,
        user_id: str,
        permission_id: str,
        reason: str,
        *,
        method: str | None = None,
        path: str | None = None,
    ) -> None: ...
