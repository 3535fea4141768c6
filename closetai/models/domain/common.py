# closetai/models/domain/common.py
"""Closed label sets shared by the ORM, the engine and the API.

Values are the exact labels persisted by earlier versions of the service and
must not change.
"""

from enum import Enum

class ItemCategory(str, Enum):
    TOP = "top"
    BOTTOM = "bottom"
    DRESS = "dress"
    SHOES = "shoes"
    ACCESSORY = "accessory"
    OUTERWEAR = "outerwear"
    UNDERWEAR = "underwear"
    SWIMWEAR = "swimwear"
    SPORTSWEAR = "sportswear"
    FORMAL = "formal"
    CASUAL = "casual"

class ItemColor(str, Enum):
    WHITE = "White"
    BLACK = "Black"
    BLUE = "Blue"
    GRAY = "Gray"
    BROWN = "Brown"
    RED = "Red"
    GREEN = "Green"
    YELLOW = "Yellow"
    PURPLE = "Purple"
    PINK = "Pink"
    ORANGE = "Orange"
    NAVY = "Navy"
    BEIGE = "Beige"
    MULTI = "Multi"
    OTHER = "Other"

class Season(str, Enum):
    SPRING = "spring"
    SUMMER = "summer"
    FALL = "fall"
    WINTER = "winter"
    ALL_SEASON = "all-season"

class Occasion(str, Enum):
    CASUAL = "casual"
    FORMAL = "formal"
    BUSINESS = "business"
    PARTY = "party"
    WEDDING = "wedding"
    FUNERAL = "funeral"
    VACATION = "vacation"
    GYM = "gym"
    DATE = "date"
    TRAVEL = "travel"
    EVERYDAY = "everyday"

class TimeOfDay(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"
    DAY = "day"

class RecommendationType(str, Enum):
    """Recommendation kinds; the last three are reserved and never generated."""
    DAILY_OUTFIT = "daily_outfit"
    OCCASION_OUTFIT = "occasion_outfit"
    WEATHER_OUTFIT = "weather_outfit"
    COLOR_COORDINATION = "color_coordination"
    STYLE_SUGGESTION = "style_suggestion"
    MISSING_ITEM = "missing_item"
    TREND_SUGGESTION = "trend_suggestion"
    PERSONALIZED = "personalized"

class ItemPosition(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
    ACCENT = "accent"

class Algorithm(str, Enum):
    COLOR_MATCHING = "color_matching"
    STYLE_ANALYSIS = "style_analysis"
    WEATHER_BASED = "weather_based"
    OCCASION_BASED = "occasion_based"
    HYBRID = "hybrid"
    BASIC = "basic"
    FALLBACK = "fallback"

def label(value) -> str:
    """Plain string for an enum member or a raw label."""
    return value.value if isinstance(value, Enum) else value
