"""
Helpers for public profile and QR links
"""

import re
from ..config import settings


def slugify(text: str) -> str:
    """Lower-case, drop non-word characters, collapse separators into single dashes"""
    slug = text.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug, flags=re.ASCII)
    slug = re.sub(r"[\s_-]+", "-", slug)
    return slug.strip("-")


def review_url(token_id: str) -> str:
    return f"{settings.app_url}/review/{token_id}"


def profile_url(slug: str) -> str:
    return f"{settings.app_url}/worker/{slug}"
