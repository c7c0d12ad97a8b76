"""Map content service exceptions to HTTP responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from portfolio_cms.api.schemas.publishing import BatchReportResponse
from portfolio_cms.models.errors import (
    ContentValidationError,
    DiscardFailedError,
    EntityNotFoundError,
    PartialBatchFailure,
    PublishFailedError,
    ResumeActivationError,
)

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Install exception handlers for the content service errors on ``app``."""

    @app.exception_handler(EntityNotFoundError)
    async def not_found(request: Request, exc: EntityNotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={
                "detail": str(exc),
                "entity_type": str(exc.entity_type),
                "entity_id": exc.entity_id,
            },
        )

    @app.exception_handler(ContentValidationError)
    async def invalid_content(request: Request, exc: ContentValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": str(exc), "field": exc.field},
        )

    @app.exception_handler(PublishFailedError)
    @app.exception_handler(DiscardFailedError)
    @app.exception_handler(ResumeActivationError)
    async def store_failure(request: Request, exc: Exception) -> JSONResponse:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": str(exc)},
        )

    @app.exception_handler(PartialBatchFailure)
    async def partial_batch(request: Request, exc: PartialBatchFailure) -> JSONResponse:
        report = BatchReportResponse.model_validate(exc.report)
        return JSONResponse(
            status_code=status.HTTP_207_MULTI_STATUS,
            content={"detail": str(exc), "report": report.model_dump(mode="json")},
        )
