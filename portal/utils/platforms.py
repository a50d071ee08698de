"""
Platform code mapping between the UI display names and the stored codes
"""
from typing import Optional

DISPLAY_TO_DB = {
    "Rednote": "xhs",
    "Weibo": "wb",
    "Douyin": "dy",
}

DB_TO_DISPLAY = {code: name for name, code in DISPLAY_TO_DB.items()}

# Older rows spell the platform out
DB_ALIASES = {
    "weibo": "wb",
    "douyin": "dy",
    "rednote": "xhs",
}

PLATFORM_COLORS = {
    "Rednote": "#5A6ACF",
    "Weibo": "#8593ED",
    "Douyin": "#C7CEFF",
}


def to_db_platform(display: str) -> str:
    """Map a display name to its db code; unknown values pass through"""
    return DISPLAY_TO_DB.get(display, display)


def to_display_platform(code: Optional[str]) -> Optional[str]:
    """Map a db code to its display name; unknown values pass through"""
    if code is None:
        return None
    return DB_TO_DISPLAY.get(code, code)


def normalize_platform(code: Optional[str]) -> Optional[str]:
    """Display name for a stored code, tolerating case and spelled-out aliases"""
    if not code:
        return None
    lowered = code.strip().lower()
    lowered = DB_ALIASES.get(lowered, lowered)
    return DB_TO_DISPLAY.get(lowered)
