"""
Health check endpoint.
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shared.config.logging import dashboard_api_logger as logger
from shared.config.settings import settings
from shared.infrastructure.db import get_db
from shared.utils.schemas import HealthResponse, StandardApiResponse

router = APIRouter(tags=["health"])

HEALTH_PATH = "/health"


@router.get(HEALTH_PATH, response_model=StandardApiResponse[HealthResponse])
def health_check(db: Session = Depends(get_db)):
    """Verifies database connectivity. Returns 503 when the database is unreachable."""
    path = f"{settings.api_prefix}{HEALTH_PATH}"
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error("Health check failed", error=str(e))
        body = StandardApiResponse[HealthResponse](
            success=False,
            message="Database unreachable",
            data=HealthResponse(status="unhealthy", database="unreachable"),
            path=path,
        )
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=body.model_dump(mode="json"),
        )

    return StandardApiResponse[HealthResponse](
        success=True,
        message="Service healthy",
        data=HealthResponse(status="healthy", database="ok"),
        path=path,
    )
