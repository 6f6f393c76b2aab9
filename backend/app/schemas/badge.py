"""
Badge schemas
"""

from pydantic import BaseModel
from typing import Optional, List, Dict
from datetime import datetime
from ..enums.badge import BadgeTier, BadgeCategory, AwardedBy


class BadgeCriteria(BaseModel):
    """Rule descriptor stored in Badge.criteria_json"""
    type: str  # "review_count", "rating_threshold", "streak", "course_completion", "manual"
    threshold: Optional[float] = None
    min_reviews: Optional[int] = None
    consecutive: bool = False
    course_id: Optional[str] = None


class BadgeResponse(BaseModel):
    id: int
    name: str
    description: str
    tier: BadgeTier
    category: BadgeCategory
    icon_url: Optional[str] = None
    criteria_json: BadgeCriteria

    class Config:
        from_attributes = True


class WorkerBadgeResponse(BaseModel):
    badge_id: int
    awarded_at: datetime
    awarded_by: AwardedBy
    badge: BadgeResponse

    class Config:
        from_attributes = True


class BadgeAwardRequest(BaseModel):
    worker_id: int


class TierProgress(BaseModel):
    earned: int
    total: int


class BadgeProgressResponse(BaseModel):
    earned_count: int
    total_count: int
    tiers: Dict[BadgeTier, TierProgress]
    earned: List[WorkerBadgeResponse]
