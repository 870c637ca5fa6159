"""
Utility functions for portowner.

Includes duration formatting, path display helpers and file path management.
"""
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


# ============================================================================
# Time Utilities
# ============================================================================

def format_uptime(seconds: int) -> str:
    """
    Format an elapsed time as hours and minutes, seconds discarded.

    Examples:
        2700 -> "45m"
        3900 -> "1h 5m"
        7200 -> "2h"
        30 -> "0m"
    """
    if seconds < 0:
        seconds = 0

    hours = seconds // 3600
    minutes = (seconds // 60) % 60

    if hours > 0:
        return f"{hours}h {minutes}m" if minutes > 0 else f"{hours}h"
    return f"{minutes}m"


def to_utc(dt: datetime) -> datetime:
    """
    Convert to an aware UTC datetime.

    Naive values are taken as local wall-clock time, so the UTC offset in
    force at that moment (DST included) is applied.
    """
    return dt.astimezone(timezone.utc)


def seconds_since(started: datetime, now: Optional[datetime] = None) -> int:
    """Whole seconds of real time elapsed between started and now (truncated)."""
    now = to_utc(now) if now else datetime.now(timezone.utc)
    return int((now - to_utc(started)).total_seconds())


# ============================================================================
# Path Management
# ============================================================================

def get_portowner_dir() -> Path:
    """Get ~/.portowner directory path."""
    return Path.home() / ".portowner"


def get_log_dir() -> Path:
    """Get logs directory path."""
    return get_portowner_dir() / "logs"


def shorten_home(path: str, home: Optional[str] = None) -> str:
    """
    Replace a leading home directory with "~".

    Examples:
        "/home/alice/src/app" -> "~/src/app"
        "/srv/app" -> "/srv/app"
    """
    if home is None:
        try:
            home = str(Path.home())
        except RuntimeError:
            return path

    home = str(home).rstrip("/")
    if not home:
        return path

    if path == home or path.startswith(home + "/"):
        return "~" + path[len(home):]
    return path
