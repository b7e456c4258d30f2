"""Health check endpoint."""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from traindesk.api.dependencies import DatabaseDep
from traindesk.api.models import Envelope, HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", response_model=Envelope[HealthResponse])
def health(database: DatabaseDep) -> Envelope[HealthResponse] | JSONResponse:
    """Report whether the registration store answers queries."""
    try:
        database.ping()
    except SQLAlchemyError:
        logger.exception("Health check failed")
        return JSONResponse(
            status_code=503,
            content=Envelope.error("Database unavailable").model_dump(),
        )
    return Envelope.success(HealthResponse(database="ok"))
