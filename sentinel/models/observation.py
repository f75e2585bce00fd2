"""Observation model - one immutable recorded check outcome."""

from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship

from sentinel.database.base import Base


class Observation(Base):
    """
    Observation model, stored in the append-only ``history`` table.

    Attributes:
        id: Autoincrement key, also the insertion order
        monitor_id: Foreign key to the monitor
        status: HTTP status observed (or the failure sentinel)
        latency_ms: Latency in milliseconds
        checked_at: Assigned by the database at insertion
        monitor: Relationship to monitor
    """

    __tablename__ = "history"
    __table_args__ = (
        Index("ix_history_monitor_id_checked_at", "monitor_id", "checked_at"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)

    monitor_id = Column(
        String(64),
        ForeignKey("monitors.id"),
        nullable=False,
    )

    status = Column(Integer, nullable=False)
    latency_ms = Column(Integer, nullable=False)

    checked_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    monitor = relationship("Monitor", back_populates="observations")

    def __repr__(self) -> str:
        return (
            f"<Observation(id={self.id}, monitor_id='{self.monitor_id}', "
            f"status={self.status}, latency_ms={self.latency_ms})>"
        )

    def to_dict(self) -> dict:
        """Convert observation to the history wire shape."""
        return {
            "status": self.status,
            "latency_ms": self.latency_ms,
            "checked_at": self.checked_at.isoformat() if self.checked_at else None,
        }
