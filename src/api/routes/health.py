"""Health check endpoint."""

from datetime import datetime, timezone
from fastapi import APIRouter, Request

from api.models import HealthResponse

router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("", response_model=HealthResponse)
def health(request: Request):
    """Liveness check. Always 200; the database field reports MongoDB reachability."""
    connection = getattr(request.app.state, 'mongo', None)
    database = "connected" if connection is not None and connection.ping() else "disconnected"
    return HealthResponse(
        message="Server is running",
        timestamp=datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
        database=database,
    )
