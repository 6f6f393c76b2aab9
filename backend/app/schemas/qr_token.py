"""
QR token schemas
"""

from pydantic import BaseModel, Field, computed_field
from typing import Optional
from datetime import datetime
from ..enums.worker import TradeCategory
from ..utils.profile import review_url as build_review_url


class QRTokenCreate(BaseModel):
    label: str = Field(..., min_length=1, max_length=100)


class QRTokenUpdate(BaseModel):
    id: str = Field(..., min_length=1)
    label: Optional[str] = Field(None, min_length=1, max_length=100)
    is_active: Optional[bool] = None


class QRTokenResponse(BaseModel):
    id: str
    worker_id: int
    label: str
    scan_count: int
    is_active: bool
    created_at: datetime

    @computed_field
    @property
    def review_url(self) -> str:
        """Link encoded in the printed QR code"""
        return build_review_url(self.id)

    class Config:
        from_attributes = True


class TokenWorkerResponse(BaseModel):
    """Public view of the worker behind a token, for the review form"""
    display_name: str
    trade_category: TradeCategory
    avatar_url: Optional[str]
    overall_rating: float
    review_count: int

    class Config:
        from_attributes = True
