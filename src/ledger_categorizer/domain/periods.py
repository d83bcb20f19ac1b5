from datetime import date


def month_range(year: int, month: int) -> tuple[date, date | None]:
    """
    Half-open ``[start, end)`` range covering one calendar month.

    ``end`` is None for December of the last representable year.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"month must be between 1 and 12, got {month}")
    start = date(year, month, 1)
    if month < 12:
        return start, date(year, month + 1, 1)
    if year == date.max.year:
        return start, None
    return start, date(year + 1, 1, 1)
