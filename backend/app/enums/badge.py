"""
Badge-related enums
"""

import enum


class BadgeTier(str, enum.Enum):
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"


# Display/sort order, lowest tier first
TIER_ORDER = {
    BadgeTier.BRONZE: 0,
    BadgeTier.SILVER: 1,
    BadgeTier.GOLD: 2,
    BadgeTier.PLATINUM: 3,
}


class BadgeCategory(str, enum.Enum):
    VOLUME = "volume"
    RATING = "rating"
    STREAK = "streak"
    SPECIALTY = "specialty"
    COURSE = "course"


class BadgeRule(str, enum.Enum):
    REVIEW_COUNT = "review_count"
    RATING_THRESHOLD = "rating_threshold"
    STREAK = "streak"
    COURSE_COMPLETION = "course_completion"
    MANUAL = "manual"


class AwardedBy(str, enum.Enum):
    SYSTEM = "system"
    EMPLOYER = "employer"
    ADMIN = "admin"
