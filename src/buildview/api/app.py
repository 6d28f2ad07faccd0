from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from buildview.api.lifespan import lifespan
from buildview.api.routes.builds import router as builds_router
from buildview.api.routes.health import router as health_router
from buildview.api.routes.owners import router as owners_router
from buildview.api.routes.repositories import router as repositories_router
from buildview.api.routes.root import router as root_router
from buildview.api.schemas import ErrorResponse
from buildview.config import Settings, get_settings
from buildview.core.errors import ServiceError

logger = logging.getLogger(__name__)


async def service_error_handler(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, ServiceError)
    logger.info("%s %s failed: %s (%s)", request.method, request.url.path, exc.error_type, exc.status)
    body = ErrorResponse.model_validate(exc.to_document())
    return JSONResponse(content=body.model_dump(by_alias=True, exclude_none=True), status_code=exc.status)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(
        title="Buildview API",
        description="Read API for repositories, builds, and jobs.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_exception_handler(ServiceError, service_error_handler)

    prefix = f"/{settings.api_version}"
    app.include_router(root_router, include_in_schema=False)
    app.include_router(health_router, include_in_schema=False)
    app.include_router(repositories_router, prefix=prefix)
    app.include_router(builds_router, prefix=prefix)
    app.include_router(owners_router, prefix=prefix)

    return app
