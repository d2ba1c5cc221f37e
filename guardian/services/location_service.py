"""
Location Service
Handles ingestion of location reports and the read queries over stored points.
"""

from typing import List, Optional
from datetime import date, datetime, time, timedelta, timezone
import logging

from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from guardian.exceptions import NotFoundError, StorageError, ValidationError
from guardian.models.location import LocationPoint
from guardian.schemas.location import DeviceSummary, LocationReport
from guardian.services.notification_service import LogNotifier, SOSNotifier
from guardian.utils.logging import location_logger, log_operation

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 200


class LocationService:
    """Append-only store of location points keyed by device."""

    def __init__(self, db: AsyncSession, notifier: Optional[SOSNotifier] = None):
        self.db = db
        self.notifier = notifier or LogNotifier()

    @log_operation("location_ingest")
    async def ingest(self, report: LocationReport) -> LocationPoint:
        """Validate a report and append it as a new point."""
        if not report.device_id or report.lat is None or report.lng is None:
            raise ValidationError("missing required fields")

        point = LocationPoint(
            device_id=report.device_id,
            lat=report.lat,
            lng=report.lng,
            accuracy=report.accuracy if report.accuracy is not None else 0,
            speed=report.speed if report.speed is not None else 0,
            altitude=report.altitude if report.altitude is not None else 0,
            timestamp=report.timestamp or _iso_now(),
            is_sos=1 if report.is_sos else 0,
            battery=report.battery,
            network=report.network
        )

        try:
            self.db.add(point)
            await self.db.commit()
            await self.db.refresh(point)
        except SQLAlchemyError as e:
            await self._fail("location_ingest", e, device_id=report.device_id)

        is_sos = bool(report.is_sos)
        location_logger.log_location_received(point.device_id, point.lat, point.lng, is_sos)

        if is_sos:
            location_logger.log_sos_alert(point.device_id, point.lat, point.lng)
            await self.notifier.notify(point.device_id, point.lat, point.lng)

        return point

    @log_operation("latest_position")
    async def get_latest(self, device_id: str) -> LocationPoint:
        """Most recent point for a device."""
        query = (
            select(LocationPoint)
            .where(LocationPoint.device_id == device_id)
            .order_by(LocationPoint.created_at.desc(), LocationPoint.id.desc())
            .limit(1)
        )

        try:
            result = await self.db.execute(query)
            point = result.scalars().first()
        except SQLAlchemyError as e:
            await self._fail("latest_position", e, device_id=device_id)

        if point is None:
            raise NotFoundError("device not found")
        return point

    @log_operation("history")
    async def get_history(
        self,
        device_id: str,
        target_date: Optional[date] = None,
        limit: int = DEFAULT_HISTORY_LIMIT
    ) -> List[LocationPoint]:
        """Points received on one UTC calendar day, newest first."""
        target_date = target_date or datetime.now(timezone.utc).date()
        day_start = datetime.combine(target_date, time.min)
        day_end = day_start + timedelta(days=1)

        query = (
            select(LocationPoint)
            .where(
                LocationPoint.device_id == device_id,
                LocationPoint.created_at >= day_start,
                LocationPoint.created_at < day_end
            )
            .order_by(LocationPoint.created_at.desc(), LocationPoint.id.desc())
            .limit(limit)
        )

        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            await self._fail("history", e, device_id=device_id)
        return list(result.scalars().all())

    @log_operation("device_roster")
    async def list_devices(self) -> List[DeviceSummary]:
        """Every device that has reported at least once."""
        query = (
            select(
                LocationPoint.device_id,
                func.max(LocationPoint.created_at).label('last_seen'),
                func.count(LocationPoint.id).label('total_points')
            )
            .group_by(LocationPoint.device_id)
            .order_by(LocationPoint.device_id)
        )

        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            await self._fail("device_roster", e)

        return [
            DeviceSummary(
                device_id=row.device_id,
                last_seen=row.last_seen,
                total_points=row.total_points
            )
            for row in result.all()
        ]

    async def _fail(self, operation: str, error: SQLAlchemyError, **context):
        location_logger.log_error(error, operation, context)
        try:
            await self.db.rollback()
        except SQLAlchemyError:
            logger.warning(f"Rollback failed after {operation} error")
        raise StorageError() from error


def _iso_now() -> str:
    """Server receipt time in the ``2026-02-25T08:30:00.000Z`` form devices send."""
    now = datetime.now(timezone.utc)
    return now.strftime('%Y-%m-%dT%H:%M:%S.') + f"{now.microsecond // 1000:03d}Z"
