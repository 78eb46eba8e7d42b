import logging

from fastapi import FastAPI, Request
from fastapi.responses import Response

from .api.logs import router as logs_router
from .api.routes_health import router as health_router
from .api.thumbnails import router as thumbnails_router
from .core.config import Settings, get_settings
from .core.errors import AssetNotFound, GenerationError
from .core.log_buffer import install_log_buffer
from .core.service import ThumbnailService
from .core.thumbnailer import ThumbnailGenerator

logger = logging.getLogger(__name__)


async def _not_found(request: Request, exc: AssetNotFound) -> Response:
    # Unknown path shape and missing raw asset look the same to the client.
    logger.debug("[thumbnails] 404 %s: %s", request.url.path, exc)
    return Response(status_code=404)


async def _server_error(request: Request, exc: GenerationError) -> Response:
    cause = exc.__cause__ or exc
    logger.error(
        "[thumbnails] 500 %s key=%s %s: %s",
        request.url.path, exc.key, type(exc).__name__, cause,
    )
    return Response(status_code=500)


def create_app(settings: Settings | None = None, generator: ThumbnailGenerator | None = None) -> FastAPI:
    settings = settings or get_settings()
    install_log_buffer(settings.LOG_LEVEL)

    app = FastAPI(title="thumbd", description="On-demand cached image thumbnails")
    app.state.settings = settings
    app.state.thumbnails = ThumbnailService.from_settings(settings, generator=generator)

    app.add_exception_handler(AssetNotFound, _not_found)
    app.add_exception_handler(GenerationError, _server_error)

    # Fixed routes first; the thumbnail route matches every path.
    app.include_router(health_router)
    app.include_router(logs_router)
    app.include_router(thumbnails_router)

    logger.info(
        "[thumbnails] serving %s thumbnails %dx%d from %s into %s",
        settings.THUMB_FORMAT, settings.THUMB_WIDTH, settings.THUMB_HEIGHT,
        settings.RAW_DIR, settings.THUMB_DIR,
    )
    return app


app = create_app()
