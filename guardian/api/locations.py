"""
Location API Endpoints
Ingestion of device reports and the monitoring queries over them.
"""

from typing import List, Optional
from datetime import date
from fastapi import APIRouter, Depends, Query

from guardian.config import Settings
from guardian.schemas.location import (
    DeviceSummary,
    IngestResult,
    LocationPoint as LocationPointSchema,
    LocationReport
)
from guardian.services.location_service import LocationService
from guardian.utils.dependencies import get_location_service, get_settings

router = APIRouter(prefix="/api", tags=["Locations"])


@router.post("/location", response_model=IngestResult)
async def report_location(
    report: LocationReport,
    service: LocationService = Depends(get_location_service)
):
    """
    Store one location report from a device.

    - **device_id**, **lat**, **lng**: required
    - **accuracy**, **speed**, **altitude**: default to 0
    - **timestamp**: defaults to the time the server received the report
    - **is_sos**: marks an emergency report and triggers an alert
    """
    await service.ingest(report)
    return IngestResult(success=True)


@router.get("/latest/{device_id}", response_model=LocationPointSchema)
async def get_latest_location(
    device_id: str,
    service: LocationService = Depends(get_location_service)
):
    """Get the most recently received point for a device."""
    return await service.get_latest(device_id)


@router.get("/history/{device_id}", response_model=List[LocationPointSchema])
async def get_location_history(
    device_id: str,
    target_date: Optional[date] = Query(None, alias="date", description="Day to fetch (YYYY-MM-DD), defaults to today"),
    service: LocationService = Depends(get_location_service),
    settings: Settings = Depends(get_settings)
):
    """
    Get a device's trail for one day, newest first.

    An unknown device yields an empty list.
    """
    return await service.get_history(device_id, target_date, limit=settings.history_limit)


@router.get("/devices", response_model=List[DeviceSummary])
async def list_devices(
    service: LocationService = Depends(get_location_service)
):
    """Get every device that has reported, with last_seen and total_points."""
    return await service.list_devices()
