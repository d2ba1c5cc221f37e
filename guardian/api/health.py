from datetime import datetime, timezone
from fastapi import APIRouter

from guardian.schemas.location import HealthStatus

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthStatus)
async def health_check():
    return HealthStatus(status="ok", time=datetime.now(timezone.utc))
