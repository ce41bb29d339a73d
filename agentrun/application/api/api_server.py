from typing import Optional

from fastapi import FastAPI
import structlog

from agentrun.config.settings import Settings, get_settings
from agentrun.domain.history.history_manager import HistoryManager
from agentrun.domain.history.media import MediaURIResolver
from agentrun.infrastructure.media.resolvers import build_media_resolver
from agentrun.infrastructure.observability.logging import setup_logging
from .route.history import router as history_router

logger = structlog.get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    resolver: Optional[MediaURIResolver] = None
) -> FastAPI:
    """Application factory for the history reconciliation API"""

    settings = settings or get_settings()
    setup_logging(
        log_level=settings.log_level,
        log_format=settings.log_format,
        service_name=settings.service_name
    )

    app = FastAPI(title=settings.app_name)
    app.state.settings = settings
    app.state.history_manager = HistoryManager(
        resolver or build_media_resolver(settings),
        drop_unpaired_calls=settings.drop_unpaired_calls
    )
    app.include_router(history_router)

    @app.get("/health")
    async def health():
        return {"status": "ok", "service": settings.service_name}

    logger.info("History API created", app_name=settings.app_name)
    return app
