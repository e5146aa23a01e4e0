"""FastAPI application entry point for MediConnect."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mediconnect import __version__
from mediconnect.api.admin import router as admin_router
from mediconnect.api.deps import (
    RedirectRequired,
    SessionLoading,
    loading_handler,
    redirect_handler,
)
from mediconnect.api.pages import not_found_router
from mediconnect.api.pages import router as pages_router
from mediconnect.api.routes import router
from mediconnect.auth.provider import AuthProvider
from mediconnect.auth.service import SupabaseAuthService
from mediconnect.config import get_settings
from mediconnect.db.client import DatabaseClient, create_supabase_client
from mediconnect.services.notifier import ToastFeed

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _wire_defaults(app: FastAPI) -> None:
    """Create the Supabase-backed provider, database and toast feed if not injected."""
    settings = get_settings()
    state = app.state

    if getattr(state, "toast_feed", None) is None:
        state.toast_feed = ToastFeed(max_items=settings.notification_history)

    needs_client = (
        getattr(state, "auth_provider", None) is None
        or getattr(state, "db", None) is None
    )
    client = create_supabase_client() if needs_client else None

    if getattr(state, "db", None) is None:
        state.db = DatabaseClient(client)

    if getattr(state, "auth_provider", None) is None:
        state.auth_provider = AuthProvider(
            SupabaseAuthService(client),
            notifier=state.toast_feed,
            default_location=settings.default_location,
            allow_self_role_elevation=settings.allow_self_role_elevation,
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: the auth provider lives exactly as long as the app."""
    logger.info(f"Starting MediConnect Server v{__version__}")
    settings = get_settings()
    logger.info(f"Debug mode: {settings.debug}")

    _wire_defaults(app)

    async with app.state.auth_provider as provider:
        state = provider.state
        logger.info(
            f"Session hydrated (authenticated={state.is_authenticated})"
        )
        yield

    logger.info("Shutting down MediConnect Server")


def create_app(
    auth_provider: AuthProvider | None = None,
    db: DatabaseClient | None = None,
    toast_feed: ToastFeed | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        auth_provider: Provider to use instead of the Supabase-backed one
        db: Database client to use instead of the Supabase-backed one
        toast_feed: Notification feed; defaults to the injected provider's
            notifier when that is a ToastFeed
    """
    settings = get_settings()

    app = FastAPI(
        title="MediConnect",
        description="Session and authorization server for the MediConnect platform",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    # The feed served by /notifications must be the one the provider writes to
    if toast_feed is None and auth_provider is not None:
        if isinstance(auth_provider.notifier, ToastFeed):
            toast_feed = auth_provider.notifier
        else:
            logger.warning("Auth provider notifier is not a ToastFeed; its notifications are not served")

    app.state.auth_provider = auth_provider
    app.state.db = db
    app.state.toast_feed = toast_feed

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RedirectRequired, redirect_handler)
    app.add_exception_handler(SessionLoading, loading_handler)

    # Catch-all must come last
    app.include_router(router)
    app.include_router(pages_router)
    app.include_router(admin_router)
    app.include_router(not_found_router)

    return app


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "mediconnect.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
