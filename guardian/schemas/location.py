from pydantic import BaseModel, Field
from typing import Any, Optional
from datetime import datetime


class LocationReport(BaseModel):
    """Incoming report; presence of the required fields is checked by the service."""
    device_id: Optional[str] = Field(None, description="Reporting device identifier")
    lat: Optional[float] = Field(None, ge=-90, le=90, allow_inf_nan=False, description="Latitude in decimal degrees")
    lng: Optional[float] = Field(None, ge=-180, le=180, allow_inf_nan=False, description="Longitude in decimal degrees")
    accuracy: Optional[float] = Field(None, allow_inf_nan=False, description="Location accuracy in meters")
    speed: Optional[float] = Field(None, allow_inf_nan=False, description="Speed in m/s")
    altitude: Optional[float] = Field(None, allow_inf_nan=False, description="Altitude in meters")
    timestamp: Optional[str] = Field(None, description="Client-side ISO-8601 timestamp")
    is_sos: Optional[Any] = Field(False, description="Any truthy value marks an emergency report")
    battery: Optional[float] = Field(None, allow_inf_nan=False)
    network: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "device_id": "dev1",
                "lat": 31.23,
                "lng": 121.47,
                "accuracy": 12.0,
                "speed": 0.8,
                "altitude": 4.0,
                "timestamp": "2026-02-25T08:30:00.000Z",
                "is_sos": False,
                "battery": 76,
                "network": "wifi"
            }
        }


class LocationPoint(BaseModel):
    id: int
    device_id: str
    lat: float
    lng: float
    accuracy: Optional[float] = None
    speed: Optional[float] = None
    altitude: Optional[float] = None
    is_sos: int = 0
    battery: Optional[float] = None
    network: Optional[str] = None
    timestamp: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class DeviceSummary(BaseModel):
    device_id: str
    last_seen: datetime
    total_points: int


class IngestResult(BaseModel):
    success: bool = True


class HealthStatus(BaseModel):
    status: str = "ok"
    time: datetime
