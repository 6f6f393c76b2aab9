"""
Review model for customer ratings submitted through a QR token
"""

from sqlalchemy import Column, Integer, ForeignKey, String, Text, Boolean, CheckConstraint
from sqlalchemy.orm import relationship
from .base import BaseModel


class Review(BaseModel):
    __tablename__ = "reviews"
    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating_range"),
    )

    worker_id = Column(Integer, ForeignKey("workers.id"), nullable=False, index=True)
    qr_token_id = Column(String(36), ForeignKey("qr_tokens.id"), nullable=False, index=True)

    # Rating (1-5 stars)
    rating = Column(Integer, nullable=False)

    # Optional reviewer input
    comment = Column(Text, nullable=True)
    reviewer_name = Column(String(100), nullable=True)

    # Client-derived hash; an anti-abuse hint, not an identity
    reviewer_fingerprint = Column(String(255), nullable=False)

    is_verified = Column(Boolean, default=True, nullable=False)
    is_flagged = Column(Boolean, default=False, nullable=False, index=True)  # Hidden from listings and aggregation

    # Relationships
    worker = relationship("Worker", back_populates="reviews")
    qr_token = relationship("QRToken", back_populates="reviews")
