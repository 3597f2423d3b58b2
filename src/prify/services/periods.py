"""Calendar period boundaries used by listing filters and statistics."""

from datetime import date, datetime, time, timedelta

PERIODS = ("today", "week", "month", "quarter", "year")


def _start(day: date) -> datetime:
    return datetime.combine(day, time.min)


def _end(day: date) -> datetime:
    return datetime.combine(day, time.max)


def _last_day_of_month(year: int, month: int) -> date:
    if month == 12:
        return date(year, 12, 31)
    return date(year, month + 1, 1) - timedelta(days=1)


def period_range(period: str, now: datetime | None = None) -> tuple[datetime, datetime]:
    """Get the first and last instant of the period containing ``now``.

    Weeks start on Monday.
    """
    if now is None:
        now = datetime.now()
    today = now.date()

    if period == "today":
        return _start(today), _end(today)
    if period == "week":
        monday = today - timedelta(days=today.weekday())
        return _start(monday), _end(monday + timedelta(days=6))
    if period == "month":
        first = today.replace(day=1)
        return _start(first), _end(_last_day_of_month(today.year, today.month))
    if period == "quarter":
        first_month = 3 * ((today.month - 1) // 3) + 1
        first = date(today.year, first_month, 1)
        return _start(first), _end(_last_day_of_month(today.year, first_month + 2))
    if period == "year":
        return _start(date(today.year, 1, 1)), _end(date(today.year, 12, 31))

    raise ValueError(f"Unknown period '{period}'. Expected one of: {', '.join(PERIODS)}")


def days_in_range(start: datetime, end: datetime) -> list[date]:
    """Every calendar day from ``start`` to ``end`` inclusive."""
    days = []
    day = start.date()
    while day <= end.date():
        days.append(day)
        day += timedelta(days=1)
    return days
