"""
Script to load the default badge catalog
Run this script after the tables exist; badges already present (by name) are left alone
"""

import sys
from sqlalchemy.exc import SQLAlchemyError
from app.database import SessionLocal, init_db
from app.models.badge import Badge
from app.enums.badge import BadgeTier, BadgeCategory

DEFAULT_BADGES = [
    {
        "name": "First Review",
        "description": "Received your very first review.",
        "tier": BadgeTier.BRONZE,
        "category": BadgeCategory.VOLUME,
        "criteria_json": {"type": "review_count", "threshold": 1},
    },
    {
        "name": "Rising Star",
        "description": "Collected 10 reviews.",
        "tier": BadgeTier.BRONZE,
        "category": BadgeCategory.VOLUME,
        "criteria_json": {"type": "review_count", "threshold": 10},
    },
    {
        "name": "Crowd Favorite",
        "description": "Collected 50 reviews.",
        "tier": BadgeTier.SILVER,
        "category": BadgeCategory.VOLUME,
        "criteria_json": {"type": "review_count", "threshold": 50},
    },
    {
        "name": "Centurion",
        "description": "Collected 100 reviews.",
        "tier": BadgeTier.GOLD,
        "category": BadgeCategory.VOLUME,
        "criteria_json": {"type": "review_count", "threshold": 100},
    },
    {
        "name": "Highly Rated",
        "description": "Held a 4.5 average over at least 10 reviews.",
        "tier": BadgeTier.SILVER,
        "category": BadgeCategory.RATING,
        "criteria_json": {"type": "rating_threshold", "threshold": 4.5, "min_reviews": 10},
    },
    {
        "name": "Elite Service",
        "description": "Held a 4.8 average over at least 50 reviews.",
        "tier": BadgeTier.GOLD,
        "category": BadgeCategory.RATING,
        "criteria_json": {"type": "rating_threshold", "threshold": 4.8, "min_reviews": 50},
    },
    {
        "name": "Consistent",
        "description": "Ten reviews in a row rated 4 stars or more.",
        "tier": BadgeTier.SILVER,
        "category": BadgeCategory.STREAK,
        "criteria_json": {"type": "streak", "threshold": 10},
    },
    {
        "name": "Perfect Ten",
        "description": "Ten 5-star reviews in a row.",
        "tier": BadgeTier.PLATINUM,
        "category": BadgeCategory.STREAK,
        "criteria_json": {"type": "streak", "threshold": 10, "consecutive": True},
    },
    {
        "name": "Employer Recognized",
        "description": "Recognized by an employer for outstanding work.",
        "tier": BadgeTier.GOLD,
        "category": BadgeCategory.SPECIALTY,
        "criteria_json": {"type": "manual"},
    },
]


def seed_badges():
    """Insert any default badge that is not in the catalog yet"""

    print("Seeding badge catalog...")

    init_db()
    db = SessionLocal()
    try:
        existing_names = {name for (name,) in db.query(Badge.name).all()}
        added = 0
        for badge_data in DEFAULT_BADGES:
            if badge_data["name"] in existing_names:
                continue
            db.add(Badge(**badge_data, created_by="seed"))
            added += 1
        db.commit()

        print(f"✓ Added {added} badge(s), {len(DEFAULT_BADGES) - added} already present")

    except SQLAlchemyError as e:
        db.rollback()
        print(f"✗ Error seeding badges: {e}")
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    seed_badges()
