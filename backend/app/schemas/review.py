"""
Review schemas for request/response models
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime


class ReviewCreate(BaseModel):
    qr_token_id: str = Field(..., min_length=1)
    # Strict: "5", 4.5 and true are all rejected, only JSON integers pass
    rating: int = Field(..., ge=1, le=5, strict=True, description="Rating must be between 1 and 5")
    comment: Optional[str] = None
    reviewer_name: Optional[str] = None
    fingerprint: str = Field(..., min_length=1)

    @field_validator("comment", "reviewer_name")
    @classmethod
    def blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        """Trim optional text; empty input is stored as null"""
        if value is None:
            return None
        value = value.strip()
        return value or None


class ReviewCreatedResponse(BaseModel):
    success: bool
    review_id: int


class ReviewResponse(BaseModel):
    id: int
    worker_id: int
    qr_token_id: str
    rating: int
    comment: Optional[str]
    reviewer_name: Optional[str]
    is_verified: bool
    created_at: datetime

    class Config:
        from_attributes = True


class ReviewListResponse(BaseModel):
    reviews: List[ReviewResponse]
    total: int


class ReviewModerationUpdate(BaseModel):
    is_flagged: bool


class ReviewModerationResponse(ReviewResponse):
    is_flagged: bool
