"""
Worker model for public reputation profiles
"""

from sqlalchemy import Column, String, Text, Boolean, Float, Integer, Enum
from sqlalchemy.orm import relationship
from .base import BaseModel
from ..enums.worker import TradeCategory


class Worker(BaseModel):
    __tablename__ = "workers"

    # Identity from the external auth provider (JWT "sub")
    auth_user_id = Column(String(100), unique=True, nullable=False, index=True)
    email = Column(String(255), nullable=True)  # Used for review/welcome notifications

    # Profile
    display_name = Column(String(100), nullable=False)
    slug = Column(String(100), unique=True, nullable=False, index=True)
    trade_category = Column(Enum(TradeCategory), nullable=False, default=TradeCategory.OTHER)
    bio = Column(Text, nullable=True)
    avatar_url = Column(String(500), nullable=True)
    is_public = Column(Boolean, default=True, nullable=False)

    # Derived from non-flagged reviews, recomputed after every insert/moderation change
    overall_rating = Column(Float, default=0.0, nullable=False)
    review_count = Column(Integer, default=0, nullable=False)

    # Relationships
    qr_tokens = relationship("QRToken", back_populates="worker", order_by="QRToken.created_at")
    reviews = relationship("Review", back_populates="worker")
    worker_badges = relationship("WorkerBadge", back_populates="worker", order_by="WorkerBadge.awarded_at")

    @property
    def badges(self):
        """Earned badges, oldest award first"""
        return self.worker_badges
