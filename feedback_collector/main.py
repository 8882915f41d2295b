"""Application factory.

Run with ``uvicorn feedback_collector.main:create_app --factory``.
"""

import logging
from typing import Optional

from advanced_alchemy.extensions.litestar import (
    AsyncSessionConfig,
    SQLAlchemyAsyncConfig,
    SQLAlchemyInitPlugin,
)
from litestar import Litestar, Request
from litestar.config.cors import CORSConfig
from litestar.di import Provide
from litestar.exceptions import HTTPException
from litestar.response import Response
from litestar.status_codes import HTTP_500_INTERNAL_SERVER_ERROR
from sqlalchemy.engine import make_url

from feedback_collector.config import Settings
from feedback_collector.context import AppContext
from feedback_collector.models import Base
from feedback_collector.routes import ROUTES
from feedback_collector.utils.logging import configure_logging, log_request_error

logger = logging.getLogger("FeedbackCollector")


# --- Exception handlers

def handle_http_exception(request: Request, exc: HTTPException) -> Response:
    """Render client-facing errors with their own status code."""
    content = {"detail": exc.detail}
    if exc.extra:
        content["errors"] = exc.extra
    return Response(
        content=content,
        status_code=exc.status_code,
        headers=exc.headers,
        media_type="application/json",
    )


def log_exceptions(request: Request, exc: Exception) -> Response:
    """Anything unexpected: log the detail, return a generic 500."""
    log_request_error(request, exc, message="Unhandled exception occurred")
    return Response(
        content={"detail": "Internal Server Error"},
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        media_type="application/json",
    )


def create_app(settings: Optional[Settings] = None) -> Litestar:
    """Build the Litestar app around one explicit ``AppContext``."""
    settings = settings or Settings.from_env()
    configure_logging(settings.debug)

    logger.info(f"Starting app in {'DEBUG' if settings.debug else 'PRODUCTION'} mode")
    logger.info(f"Database URL: {make_url(settings.database_url).render_as_string(hide_password=True)}")
    if settings.ephemeral_secret:
        logger.warning("JWT_SECRET is not set; tokens will not survive a restart")
    if settings.admin_registration_enabled:
        logger.info("Admin self-registration is enabled")

    context = AppContext.from_settings(settings)

    def provide_context() -> AppContext:
        return context

    # --- SQLAlchemy config
    db_config = SQLAlchemyAsyncConfig(
        connection_string=settings.database_url,
        session_dependency_key="session",
        metadata=Base.metadata,
        create_all=settings.debug,  # Auto-create tables on startup (dev only)
        session_config=AsyncSessionConfig(expire_on_commit=False),
    )

    return Litestar(
        route_handlers=ROUTES,
        debug=settings.debug,
        # Logging is configured by configure_logging above
        logging_config=None,
        plugins=[SQLAlchemyInitPlugin(db_config)],
        dependencies={"ctx": Provide(provide_context, sync_to_thread=False)},
        cors_config=CORSConfig(allow_origins=list(settings.cors_allow_origins)),
        exception_handlers={
            HTTPException: handle_http_exception,
            Exception: log_exceptions,
        },
    )
