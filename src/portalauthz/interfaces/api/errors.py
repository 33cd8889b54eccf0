"""Mapping of domain exceptions to HTTP responses."""

import logging

import falcon
import falcon.asgi

from portalauthz.domain.exceptions import (
    DuplicateIdentifier,
    InvalidExpiry,
    NotFound,
    PermissionDenied,
    RBACError,
    ReferentialConflict,
    ResolutionUnavailable,
    RoleInactive,
    StoreUnavailable,
    SystemRoleImmutable,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS: list[tuple[type[RBACError], str]] = [
    (ValidationError, falcon.HTTP_400),
    (InvalidExpiry, falcon.HTTP_400),
    (NotFound, falcon.HTTP_404),
    (DuplicateIdentifier, falcon.HTTP_409),
    (ReferentialConflict, falcon.HTTP_409),
    (RoleInactive, falcon.HTTP_409),
    (SystemRoleImmutable, falcon.HTTP_403),
    (PermissionDenied, falcon.HTTP_403),
    (ResolutionUnavailable, falcon.HTTP_503),
    (StoreUnavailable, falcon.HTTP_503),
]


def _status_for(ex: RBACError) -> str:
    for kind, status in _STATUS:
        if isinstance(ex, kind):
            return status
    return falcon.HTTP_500


async def handle_rbac_error(
    req: falcon.asgi.Request, resp: falcon.asgi.Response, ex: RBACError, params: dict
) -> None:
    """Typed error body: ``error`` is the exception kind, plus per-kind detail."""
    resp.status = _status_for(ex)
    body: dict[str, object] = {"error": type(ex).__name__, "message": str(ex)}
    if isinstance(ex, ValidationError):
        body["fields"] = ex.errors
    elif isinstance(ex, ReferentialConflict):
        body["blocking"] = ex.blocking
        body["count"] = len(ex.blocking)
    elif isinstance(ex, SystemRoleImmutable):
        body["message"] = f"'{ex.role_name}' is a protected system role and cannot be edited"
        body["fields"] = ex.fields
    elif isinstance(ex, PermissionDenied):
        body["required"] = ex.permission_id
    if resp.status == falcon.HTTP_503:
        logger.warning("%s %s: store unavailable: %s", req.method, req.path, ex)
    resp.media = body


async def handle_unexpected_error(
    req: falcon.asgi.Request, resp: falcon.asgi.Response, ex: Exception, params: dict
) -> None:
    logger.exception("Unhandled error on %s %s", req.method, req.path)
    resp.status = falcon.HTTP_500
    resp.media = {"title": "500 Internal Server Error"}
