"""
QR token model - the identifier behind each printable review code
"""

import uuid

from sqlalchemy import Column, Integer, ForeignKey, String, Boolean
from sqlalchemy.orm import relationship
from .base import BaseModel


def generate_token_id() -> str:
    return str(uuid.uuid4())


class QRToken(BaseModel):
    __tablename__ = "qr_tokens"

    # Replaces the integer id: it is printed in a public URL, so it must not be enumerable
    id = Column(String(36), primary_key=True, default=generate_token_id)
    worker_id = Column(Integer, ForeignKey("workers.id"), nullable=False, index=True)
    label = Column(String(100), nullable=False)
    scan_count = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    # Relationships
    worker = relationship("Worker", back_populates="qr_tokens")
    reviews = relationship("Review", back_populates="qr_token")
