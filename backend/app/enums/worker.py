"""
Worker-related enums
"""

import enum


class TradeCategory(str, enum.Enum):
    HOSPITALITY = "hospitality"
    FOOD_SERVICE = "food_service"
    DELIVERY = "delivery"
    CLEANING = "cleaning"
    RETAIL = "retail"
    CHILDCARE = "childcare"
    HEALTHCARE_SUPPORT = "healthcare_support"
    BEAUTY_WELLNESS = "beauty_wellness"
    TRANSPORTATION = "transportation"
    MAINTENANCE = "maintenance"
    SECURITY = "security"
    OTHER = "other"
