"""Domain exceptions."""


class RBACError(Exception):
    """Base exception for the authorization core."""

    pass


class ValidationError(RBACError):
    """Validation failed for input data.

    ``errors`` maps every violated field to a message so callers can show
    all of them at once.
    """

    def __init__(self, errors: dict[str, str] | str) -> None:
        if isinstance(errors, str):
            errors = {"__all__": errors}
        self.errors = dict(errors)
        super().__init__(
            "; ".join(f"{field}: {msg}" for field, msg in self.errors.items())
        )


class NotFound(RBACError):
    """Requested resource was not found."""

    def __init__(self, resource: str, identifier: object) -> None:
        self.resource = resource
        self.identifier = str(identifier)
        super().__init__(f"{resource} not found: {identifier}")


class RoleNotFound(NotFound):
    """Role referenced by an assignment does not exist."""

    def __init__(self, identifier: object) -> None:
        super().__init__("Role", identifier)


class DuplicateIdentifier(RBACError):
    """Uniqueness violated on create or clone."""

    def __init__(self, resource: str, identifier: object) -> None:
        self.resource = resource
        self.identifier = str(identifier)
        super().__init__(f"{resource} already exists: {identifier}")


class SystemRoleImmutable(RBACError):
    """Attempted mutation of a protected system role."""

    def __init__(self, role_name: str, fields: list[str] | None = None) -> None:
        self.role_name = role_name
        self.fields = fields or []
        detail = f" (fields: {', '.join(self.fields)})" if self.fields else ""
        super().__init__(f"'{role_name}' is a protected system role{detail}")


class ReferentialConflict(RBACError):
    """Delete blocked by live references.

    ``blocking`` lists the referencing identifiers so the caller can decide
    to cascade or abort.
    """

    def __init__(self, resource: str, identifier: object, blocking: list[str]) -> None:
        self.resource = resource
        self.identifier = str(identifier)
        self.blocking = list(blocking)
        super().__init__(
            f"{resource} {identifier} is referenced by {len(self.blocking)} record(s)"
        )


class RoleInactive(RBACError):
    """Role is deactivated and cannot be assigned."""

    def __init__(self, role_name: str) -> None:
        self.role_name = role_name
        super().__init__(f"Role is inactive: {role_name}")


class InvalidExpiry(RBACError):
    """Expiry violates the temporal invariant of an assignment."""

    pass


class StoreUnavailable(RBACError):
    """Backing store could not be reached or timed out."""

    pass


class ResolutionUnavailable(RBACError):
    """Effective permissions could not be resolved. Callers must deny."""

    pass


class PermissionDenied(RBACError):
    """User does not have permission for the requested action."""

    def __init__(self, permission_id: str, reason: str) -> None:
        self.permission_id = permission_id
        self.reason = reason
        super().__init__(reason)
