"""
Badge catalog and awarded badges
"""

from sqlalchemy import Column, Integer, ForeignKey, String, Text, DateTime, Enum, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from .base import BaseModel, utcnow
from ..enums.badge import BadgeTier, BadgeCategory, AwardedBy


class Badge(BaseModel):
    __tablename__ = "badges"

    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text, nullable=False, default="")
    tier = Column(Enum(BadgeTier), nullable=False)
    category = Column(Enum(BadgeCategory), nullable=False)
    icon_url = Column(String(500), nullable=True)

    # Rule descriptor, e.g. {"type": "streak", "threshold": 10, "consecutive": true}
    criteria_json = Column(JSON, nullable=False, default=dict)

    worker_badges = relationship("WorkerBadge", back_populates="badge")

    def __repr__(self):
        return f"<Badge(id={self.id}, name='{self.name}', tier='{self.tier}')>"


class WorkerBadge(BaseModel):
    __tablename__ = "worker_badges"
    __table_args__ = (UniqueConstraint("worker_id", "badge_id", name="uq_worker_badges_worker_badge"),)

    worker_id = Column(Integer, ForeignKey("workers.id"), nullable=False, index=True)
    badge_id = Column(Integer, ForeignKey("badges.id"), nullable=False, index=True)
    awarded_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    awarded_by = Column(Enum(AwardedBy), nullable=False, default=AwardedBy.SYSTEM)

    # Relationships
    worker = relationship("Worker", back_populates="worker_badges")
    badge = relationship("Badge", back_populates="worker_badges")
