"""Health check endpoint. Answered locally; never forwarded upstream."""

from fastapi import APIRouter

from searchfilter.core.constants import HEALTH_PATH
from searchfilter.schemas.health import HealthResponse

router = APIRouter()


@router.get(HEALTH_PATH, response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse()
