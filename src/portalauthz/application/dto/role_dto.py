"""Role and permission catalog DTOs."""

from dataclasses import dataclass, fields


@dataclass
class PermissionCreateInput:
    """Input for registering a catalog permission."""

    id: str
    name: str
    category: str
    description: str = ""


@dataclass
class PermissionPatch:
    """Fields of a permission that may change. ``None`` leaves a field as is."""

    name: str | None = None
    description: str | None = None
    category: str | None = None


@dataclass
class RoleCreateInput:
    """Input for creating a role. Category is validated against RoleCategory."""

    name: str
    category: str
    level: int
    description: str = ""
    permission_ids: list[str] | None = None
    is_system_role: bool = False
    is_active: bool = True


@dataclass
class RolePatch:
    """Partial role update. ``None`` leaves a field unchanged."""

    name: str | None = None
    description: str | None = None
    category: str | None = None
    level: int | None = None
    permission_ids: list[str] | None = None
    is_active: bool | None = None

    def provided(self) -> dict[str, object]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }
