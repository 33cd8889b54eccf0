"""Application ports - interfaces for external adapters."""

from portalauthz.application.ports.permission_cache import PermissionCache
from portalauthz.application.ports.permission_checker import PermissionChecker
from portalauthz.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "PermissionCache",
    "PermissionChecker",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
