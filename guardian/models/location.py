from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, Index, Integer, String, Text

from guardian.database import Base


def utcnow() -> datetime:
    """Naive UTC wall-clock time, as stored in ``created_at``."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class LocationPoint(Base):
    __tablename__ = "locations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    device_id = Column(String(255), nullable=False)
    lat = Column(Float, nullable=False)
    lng = Column(Float, nullable=False)
    accuracy = Column(Float, default=0)
    speed = Column(Float, default=0)
    altitude = Column(Float, default=0)
    is_sos = Column(Integer, default=0)
    battery = Column(Float, nullable=True)
    network = Column(Text, nullable=True)
    timestamp = Column(Text)  # client-supplied ISO-8601
    created_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        Index("idx_device_time", "device_id", created_at.desc()),
    )

    def __repr__(self):
        return f"<LocationPoint(id={self.id}, device_id={self.device_id})>"
