"""
Duration helpers for YouTube ISO 8601 durations.
"""
import re
from typing import Optional

_ISO_DURATION_RE = re.compile(r"^P(?:(\d+)D)?(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?)?$")


def parse_iso8601_duration(value: Optional[str]) -> Optional[int]:
    """
    Parse a YouTube duration such as "PT1H23M45S" into seconds.

    Args:
        value (Optional[str]): ISO 8601 duration string.

    Returns:
        Optional[int]: Duration in seconds, or None if missing or unparseable.
    """
    if not value or not isinstance(value, str):
        return None
    match = _ISO_DURATION_RE.match(value.strip())
    if not match or value.strip() in ("P", "PT"):
        return None
    days, hours, minutes, seconds = (int(part) if part else 0 for part in match.groups())
    return days * 86400 + hours * 3600 + minutes * 60 + seconds


def format_duration(seconds: Optional[int]) -> str:
    """Format seconds as a short human readable string, e.g. "1h 23m 45s"."""
    if not seconds or seconds < 0:
        return "0s"
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if secs:
        parts.append(f"{secs}s")
    return " ".join(parts)
