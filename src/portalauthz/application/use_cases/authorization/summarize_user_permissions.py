"""User permission summary use case."""

import logging
from datetime import datetime

from portalauthz.application.dto.authorization_dto import PermissionSummary
from portalauthz.application.use_cases.authorization.resolve_effective_permissions import (
    ResolveEffectivePermissionsUseCase,
)

logger = logging.getLogger(__name__)

ADMIN_PERMISSIONS = frozenset({"*", "*:*", "system:admin"})


class SummarizeUserPermissionsUseCase:
    """Group a user's effective permissions by category for the admin portal.

    A user is an administrator when any role in effect holds a full wildcard
    or ``system:admin``.
    """

    def __init__(
        self, unit_of_work_factory: type, resolver: ResolveEffectivePermissionsUseCase
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._resolver = resolver

    async def execute(self, user_id: str, at: datetime | None = None) -> PermissionSummary:
        permissions = await self._resolver.execute(user_id, at=at)
        ids = sorted(permissions.permission_ids)
        async with self._uow_factory() as uow:
            catalog = await uow.permissions.get_many(ids) if ids else []

        by_category: dict[str, list[str]] = {}
        for permission in sorted(catalog, key=lambda p: p.id):
            by_category.setdefault(permission.category.value, []).append(permission.id)
        missing = set(ids) - {p.id for p in catalog}
        if missing:
            logger.warning(
                "User %s holds permissions missing from the catalog: %s",
                user_id,
                ", ".join(sorted(missing)),
            )

        return PermissionSummary(
            user_id=user_id,
            evaluated_at=permissions.evaluated_at,
            role_names=permissions.role_names,
            highest_role_level=max((g.role.level for g in permissions.grants), default=0),
            is_admin=bool(ADMIN_PERMISSIONS & permissions.permission_ids),
            permissions_by_category=by_category,
            total_permissions=len(ids),
            valid_until=permissions.valid_until,
        )
