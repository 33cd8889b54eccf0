"""Permission check gate - the only authorization surface for route guards and UI."""

import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime

from portalauthz.application.dto.authorization_dto import CheckResult, EffectivePermissionSet
from portalauthz.application.ports import PermissionCache
from portalauthz.application.use_cases.audit.record_access_denied import (
    RecordAccessDeniedUseCase,
)
from portalauthz.application.use_cases.authorization.resolve_effective_permissions import (
    ResolveEffectivePermissionsUseCase,
)
from portalauthz.domain.exceptions import ResolutionUnavailable, StoreUnavailable

logger = logging.getLogger(__name__)

UNAVAILABLE = "resolution unavailable"


def _utcnow() -> datetime:
    return datetime.now(UTC)


def evaluate(
    permissions: EffectivePermissionSet,
    permission_id: str,
    context: Mapping[str, str] | None = None,
) -> CheckResult:
    """Decide ``permission_id`` against a resolved set.

    When the context carries scope keys, only grants whose assignment scope
    agrees with it count.
    """
    holders = [g for g in permissions.grants if g.grants(permission_id)]
    if not holders:
        return CheckResult(False, f"no role in effect grants '{permission_id}'")

    in_scope = [g for g in holders if g.applies_to(dict(context) if context else None)]
    if not in_scope:
        names = ", ".join(sorted({g.role.name for g in holders}))
        return CheckResult(
            False,
            f"'{permission_id}' is granted by {names} only outside the requested scope",
        )

    names = sorted({g.role.name for g in in_scope})
    return CheckResult(True, f"granted by role(s): {', '.join(names)}", roles=names)


class PermissionGate:
    """Answers "does user U have permission P in context C right now?".

    Fails closed: any resolution error yields ``granted=False``.
    """

    def __init__(
        self,
        resolver: ResolveEffectivePermissionsUseCase,
        permission_cache: PermissionCache | None = None,
        clock: Callable[[], datetime] | None = None,
        denial_log: RecordAccessDeniedUseCase | None = None,
    ) -> None:
        self._resolver = resolver
        self._cache = permission_cache
        self._clock = clock or _utcnow
        self._denial_log = denial_log

    async def effective_permissions(self, user_id: str) -> EffectivePermissionSet:
        """Resolve at the current time, through the cache when one is configured."""
        now = self._clock()
        if self._cache is None:
            return await self._resolver.execute(user_id, at=now)

        cached = self._cache.get(user_id, now)
        if cached is not None:
            return cached
        generation = self._cache.generation(user_id)
        result = await self._resolver.execute(user_id, at=now)
        self._cache.put(result, generation)
        return result

    async def _resolve_or_none(self, user_id: str) -> EffectivePermissionSet | None:
        try:
            return await self.effective_permissions(user_id)
        except ResolutionUnavailable as e:
            logger.warning("Denying user %s: %s", user_id, e)
        except Exception:
            logger.exception("Unexpected error resolving permissions of user %s", user_id)
        return None

    async def check(
        self,
        user_id: str,
        permission_id: str,
        context: Mapping[str, str] | None = None,
    ) -> CheckResult:
        if not user_id:
            return CheckResult(False, "no authenticated user")
        permissions = await self._resolve_or_none(user_id)
        if permissions is None:
            return CheckResult(False, UNAVAILABLE)

        result = evaluate(permissions, permission_id, context)
        if not result.granted:
            logger.info("Denied %s to user %s: %s", permission_id, user_id, result.reason)
        return result

    async def check_any(
        self,
        user_id: str,
        permission_ids: list[str],
        context: Mapping[str, str] | None = None,
    ) -> CheckResult:
        """Granted if at least one of ``permission_ids`` is granted."""
        if not user_id:
            return CheckResult(False, "no authenticated user")
        permissions = await self._resolve_or_none(user_id)
        if permissions is None:
            return CheckResult(False, UNAVAILABLE)

        for permission_id in permission_ids:
            result = evaluate(permissions, permission_id, context)
            if result.granted:
                return result
        return CheckResult(False, f"none of {', '.join(permission_ids)} is granted")

    async def check_all(
        self,
        user_id: str,
        permission_ids: list[str],
        context: Mapping[str, str] | None = None,
    ) -> CheckResult:
        """Granted only if every one of ``permission_ids`` is granted."""
        if not user_id:
            return CheckResult(False, "no authenticated user")
        if not permission_ids:
            return CheckResult(False, "no permissions requested")
        permissions = await self._resolve_or_none(user_id)
        if permissions is None:
            return CheckResult(False, UNAVAILABLE)

        roles: set[str] = set()
        for permission_id in permission_ids:
            result = evaluate(permissions, permission_id, context)
            if not result.granted:
                return result
            roles.update(result.roles)
        return CheckResult(True, "all permissions granted", roles=sorted(roles))

    async def has_role(self, user_id: str, role_name: str) -> CheckResult:
        """Whether a role with this name is currently in effect for the user."""
        if not user_id:
            return CheckResult(False, "no authenticated user")
        permissions = await self._resolve_or_none(user_id)
        if permissions is None:
            return CheckResult(False, UNAVAILABLE)
        if role_name in permissions.role_names:
            return CheckResult(True, f"role {role_name} in effect", roles=[role_name])
        return CheckResult(False, f"role {role_name} not in effect")

    async def record_denial(
        self,
        user_id: str,
        permission_id: str,
        reason: str,
        *,
        method: str | None = None,
        path: str | None = None,
    ) -> None:
        """Write a denial to the audit log. A failed write is logged, the denial stands."""
        if self._denial_log is None:
            return
        try:
            await self._denial_log.execute(
                user_id, permission_id, reason, method=method, path=path
            )
        except StoreUnavailable as e:
            logger.warning("Could not audit denial of %s to user %s: %s", permission_id, user_id, e)
