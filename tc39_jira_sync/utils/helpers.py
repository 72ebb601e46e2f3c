"""General utility functions and helper classes."""

from datetime import timezone, tzinfo
from zoneinfo import ZoneInfo


def format_stage(stage: float) -> str:
    """Format a stage the way the dataset and the stage mapping spell it (e.g. 2 -> '2', 2.7 -> '2.7')."""
    return f"{stage:g}"


def resolve_timezone(name: str) -> tzinfo:
    """Resolve a time zone name, without requiring tzdata for UTC."""
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)
