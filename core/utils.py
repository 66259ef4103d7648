import datetime
import math

ELLIPSIS = "..."


def month_name(m: int) -> str:
    """
    Returns the full name of a month.
    Example: 1 -> 'January', 2 -> 'February'.
    """
    # 1900 is an arbitrary valid year used just to format the month name
    return datetime.date(1900, m, 1).strftime("%B")


def format_date(year: int, month: int, day: int) -> str:
    """
    Formats a date the way the member form stores it, without zero padding.
    Example: (2001, 3, 7) -> '2001-3-7'.
    """
    return f"{year}-{month}-{day}"


def truncate(text: str, width: int) -> str:
    """
    Cuts text longer than width down to width characters, the last three
    being an ellipsis. Shorter text is returned unchanged.
    """
    if text is None:
        return ""
    if len(text) <= width:
        return text
    return text[:max(width - len(ELLIPSIS), 0)] + ELLIPSIS


def round_money(value: float) -> float:
    """Rounds to 2 decimal places, halves away from zero for positive amounts."""
    return math.floor(value * 100.0 + 0.5) / 100.0
