from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from guardian.config import Settings
from guardian.database import get_db
from guardian.services.location_service import LocationService


def get_settings(request: Request) -> Settings:
    """Settings the running application was built with"""
    return request.app.state.settings


async def get_location_service(
    request: Request,
    db: AsyncSession = Depends(get_db)
) -> LocationService:
    """Location service bound to this request's session and the app notifier"""
    return LocationService(db, notifier=request.app.state.notifier)
