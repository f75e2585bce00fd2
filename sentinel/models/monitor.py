"""Monitor model - the current state of a monitored endpoint."""

from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship

from sentinel.database.base import Base


class Monitor(Base):
    """
    Monitor model holding the latest known state of a target endpoint.

    Every recorded check overwrites ``status``, ``latency_ms`` and
    ``last_checked_at``. A ``status`` of ``None`` means the monitor has
    never been checked.

    Attributes:
        id: Opaque monitor identifier
        name: Optional display label
        endpoint: URL probed by checks
        status: Last observed HTTP status (or the failure sentinel)
        latency_ms: Last observed latency in milliseconds
        last_checked_at: UTC time of the last recorded check
        created_at: Timestamp when the monitor was created
        observations: Relationship to the history rows
    """

    __tablename__ = "monitors"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=True)
    endpoint = Column(String(2048), nullable=False)

    # Current state
    status = Column(Integer, nullable=True)
    latency_ms = Column(Integer, nullable=True)
    last_checked_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    observations = relationship(
        "Observation",
        back_populates="monitor",
        order_by="Observation.id",
    )

    def __repr__(self) -> str:
        return f"<Monitor(id='{self.id}', endpoint='{self.endpoint}', status={self.status})>"

    def to_dict(self) -> dict:
        """Convert monitor to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "endpoint": self.endpoint,
            "status": self.status,
            "latency_ms": self.latency_ms,
            "last_checked_at": self.last_checked_at.isoformat() if self.last_checked_at else None,
        }
