"""Permission identifier - ``resource:action`` with wildcard forms."""

import re
from dataclasses import dataclass

WILDCARD = "*"

_PATTERN = re.compile(
    r"^(\*|\*:\*|[a-z][a-z0-9_.-]*:(\*|[a-z][a-z0-9_.-]*))$"
)


@dataclass(frozen=True)
class PermissionId:
    """Validated permission identifier such as ``grades:edit``.

    ``*`` / ``*:*`` grant everything, ``grades:*`` grants every grades action.
    """

    value: str

    def __post_init__(self) -> None:
        if not _PATTERN.match(self.value):
            raise ValueError(
                f"Invalid permission identifier {self.value!r}, expected 'resource:action'"
            )

    @property
    def resource(self) -> str:
        return self.value.split(":", 1)[0]

    @property
    def is_wildcard(self) -> bool:
        return WILDCARD in self.value

    def grants(self, requested: str) -> bool:
        """Whether holding this permission satisfies ``requested``."""
        if self.value == requested:
            return True
        if self.value in (WILDCARD, "*:*"):
            return True
        if self.value.endswith(":*"):
            return requested.split(":", 1)[0] == self.resource
        return False


def is_valid_permission_id(value: str) -> bool:
    return bool(_PATTERN.match(value))


def permission_grants(granted: str, requested: str) -> bool:
    """Wildcard-aware match between a held and a requested identifier."""
    if not is_valid_permission_id(granted):
        return False
    return PermissionId(granted).grants(requested)
