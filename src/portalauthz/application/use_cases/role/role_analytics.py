"""Role analytics use case."""

from collections import Counter
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from portalauthz.application.use_cases.validation import ensure_utc
from portalauthz.domain.entities import Role


@dataclass
class RoleAnalytics:
    """Registry and ledger figures shown on the admin dashboard."""

    total_roles: int
    active_roles: int
    system_roles: int
    custom_roles: int
    roles_by_category: dict[str, int] = field(default_factory=dict)
    most_used: list[tuple[Role, int]] = field(default_factory=list)
    recent_assignments: int = 0
    expiring_assignments: int = 0


class GetRoleAnalyticsUseCase:
    """Counts of roles by kind and category, the most held active roles,
    assignments made recently and assignments about to expire."""

    def __init__(
        self,
        unit_of_work_factory: type,
        *,
        recent_window: timedelta = timedelta(days=7),
        expiring_window: timedelta = timedelta(days=30),
        top: int = 10,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._recent_window = recent_window
        self._expiring_window = expiring_window
        self._top = top

    async def execute(self, now: datetime | None = None) -> RoleAnalytics:
        now = ensure_utc(now) if now else datetime.now(UTC)
        async with self._uow_factory() as uow:
            roles = await uow.roles.list()
            held = await uow.assignments.count_active_by_role(now)
            recent = await uow.assignments.count_assigned_since(now - self._recent_window)
            expiring = await uow.assignments.list_expiring(now, now + self._expiring_window)

        by_category = Counter(r.category.value for r in roles)
        active = [r for r in roles if r.is_active]
        most_used = sorted(
            ((r, held.get(r.id, 0)) for r in active if held.get(r.id, 0)),
            key=lambda item: (-item[1], item[0].name),
        )[: self._top]
        system = sum(1 for r in roles if r.is_system_role)
        return RoleAnalytics(
            total_roles=len(roles),
            active_roles=len(active),
            system_roles=system,
            custom_roles=len(roles) - system,
            roles_by_category=dict(sorted(by_category.items())),
            most_used=most_used,
            recent_assignments=recent,
            expiring_assignments=len(expiring),
        )
