"""Application entry point and composition root."""

import logging

import falcon.asgi

from portalauthz import __version__
from portalauthz.config import Settings, get_settings
from portalauthz.infrastructure.auth.keycloak_provider import KeycloakProvider
from portalauthz.infrastructure.cache.memory_permission_cache import InMemoryPermissionCache
from portalauthz.infrastructure.persistence.postgres.connection import create_pool
from portalauthz.infrastructure.persistence.postgres.unit_of_work import create_uow_factory
from portalauthz.interfaces.api.app import create_api
from portalauthz.interfaces.api.middleware.auth import AuthMiddleware
from portalauthz.interfaces.api.middleware.cors import CORSMiddleware
from portalauthz.interfaces.api.middleware.pool_lifespan import PoolLifespanMiddleware

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level="DEBUG" if settings.debug else settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(settings: Settings | None = None) -> falcon.asgi.App:
    """Composition root - build Falcon app with all dependencies."""
    settings = settings or get_settings()
    pool = create_pool(
        settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
    )
    uow_factory = create_uow_factory(pool, timeout_ms=settings.store_timeout_ms)

    keycloak = (
        KeycloakProvider(
            server_url=settings.keycloak_url,
            realm=settings.keycloak_realm,
            client_id=settings.keycloak_client_id,
            client_secret=settings.keycloak_client_secret,
        )
        if settings.keycloak_client_secret
        else None
    )
    if keycloak is None:
        logger.warning("No Keycloak client secret configured; every request is anonymous")

    cache = (
        InMemoryPermissionCache(settings.permission_cache_size)
        if settings.permission_cache_enabled
        else None
    )

    return create_api(
        uow_factory,
        middleware=[
            CORSMiddleware(settings.cors_origin_list),
            PoolLifespanMiddleware(pool),
            AuthMiddleware(keycloak),
        ],
        permission_cache=cache,
        min_level=settings.role_level_min,
        max_level=settings.role_level_max,
    )


def main() -> None:
    """CLI entry point - run the API under uvicorn."""
    import uvicorn

    settings = get_settings()
    configure_logging(settings)
    logger.info("portal-authz v%s starting (%s)", __version__, settings.environment)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
