"""
Worker schemas for request/response models
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Dict
from datetime import datetime
from ..enums.worker import TradeCategory
from .badge import WorkerBadgeResponse
from .review import ReviewResponse


def _strip_display_name(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError("display_name must not be blank")
    return value


class WorkerCreate(BaseModel):
    display_name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=1, max_length=100)
    trade_category: TradeCategory
    bio: Optional[str] = None

    @field_validator("display_name")
    @classmethod
    def strip_display_name(cls, value: str) -> str:
        return _strip_display_name(value)


class WorkerUpdate(BaseModel):
    display_name: Optional[str] = Field(None, min_length=1, max_length=100)
    bio: Optional[str] = None
    trade_category: Optional[TradeCategory] = None
    is_public: Optional[bool] = None
    avatar_url: Optional[str] = None

    @field_validator("display_name")
    @classmethod
    def strip_display_name(cls, value: Optional[str]) -> Optional[str]:
        return _strip_display_name(value)


class WorkerResponse(BaseModel):
    id: int
    display_name: str
    slug: str
    trade_category: TradeCategory
    bio: Optional[str]
    avatar_url: Optional[str]
    overall_rating: float
    review_count: int
    is_public: bool
    created_at: datetime
    updated_at: Optional[datetime]
    badges: List[WorkerBadgeResponse] = []

    class Config:
        from_attributes = True


class WorkerEnvelope(BaseModel):
    worker: WorkerResponse


class RatingTrendPoint(BaseModel):
    date: str
    rating: float
    count: int


class WorkerStatsResponse(BaseModel):
    total_reviews: int
    overall_rating: float
    rating_breakdown: Dict[int, int]
    rating_trend: List[RatingTrendPoint]
    badges_earned: int
    recent_reviews: List[ReviewResponse]


class PublicProfileResponse(BaseModel):
    worker: WorkerResponse
    rating_breakdown: Dict[int, int]
    reviews: List[ReviewResponse]
