"""Root API router with the /api/v1 prefix and middleware registration."""

from fastapi import APIRouter, FastAPI

from community_api.api.middleware import (
    RateLimitMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
    setup_cors,
)
from community_api.core.config import Settings


def create_router(settings: Settings) -> APIRouter:
    """Create the root API router with all sub-routers included."""
    from community_api.api.v1.auth import router as auth_router
    from community_api.api.v1.chapters import chapters_router
    from community_api.api.v1.contributors import contributors_router
    from community_api.api.v1.projects import projects_router
    from community_api.api.v1.tech_imports import tech_imports_router
    from community_api.api.v1.techs import techs_router

    root_router = APIRouter(prefix=settings.api_v1_prefix)
    root_router.include_router(auth_router)
    # import routes before /techs/{tech_id}
    root_router.include_router(tech_imports_router)
    root_router.include_router(techs_router)
    root_router.include_router(chapters_router)
    root_router.include_router(projects_router)
    root_router.include_router(contributors_router)
    return root_router


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register all middleware on the app."""
    setup_cors(app, settings)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        requests_per_minute=settings.rate_limit_per_minute,
        trusted_proxy_headers=settings.trusted_proxy_header_list,
    )
    app.add_middleware(RequestLoggingMiddleware)
