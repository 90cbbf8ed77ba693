"""Relative timestamps for display ("5m ago")."""
from datetime import datetime, timezone
from typing import Optional


def format_time(then: datetime, now: Optional[datetime] = None) -> str:
    """
    Render ``then`` relative to ``now``.

    Months are 30 days and years 365 days; anything under a minute (or in
    the future) is "Just now".
    """
    if then.tzinfo is None:
        then = then.replace(tzinfo=timezone.utc)
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    seconds = (now - then).total_seconds()
    minutes = int(seconds // 60)
    hours = int(seconds // 3600)
    days = int(seconds // 86400)
    months = days // 30
    years = days // 365

    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes}m ago"
    if hours < 24:
        return f"{hours}h ago"
    if days < 30:
        return f"{days}d ago"
    # days 360-364 are 12 months but not yet a year
    if months < 12 or years == 0:
        return f"{months}mo ago"
    return f"{years}y ago"
