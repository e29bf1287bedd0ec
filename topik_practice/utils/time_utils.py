"""Time utilities."""
from datetime import date, datetime, timezone


def today_iso(today: date | None = None) -> str:
    """Get a date as YYYY-MM-DD (UTC today by default)."""
    if today is None:
        today = datetime.now(timezone.utc).date()
    return today.isoformat()


def format_clock(seconds: int) -> str:
    """Format remaining seconds as MM:SS."""
    seconds = max(0, int(seconds))
    minutes, remaining = divmod(seconds, 60)
    return f"{minutes:02d}:{remaining:02d}"
