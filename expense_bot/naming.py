"""Monthly sheet naming."""

from datetime import date, timedelta

from expense_bot.locales import RU, Locale


def partition_name(day: date, locale: Locale = RU) -> str:
    """Return the sheet name holding expenses for ``day``, e.g. ``"март 2024"``."""
    return f"{locale.month_names[day.month - 1]} {day.year:04d}"


def partitions_for(start: date, end: date, locale: Locale = RU) -> list[str]:
    """Return the sheet names touched by the inclusive span ``start..end``, in date order."""
    names: list[str] = []
    day = start
    while day <= end:
        name = partition_name(day, locale)
        if name not in names:
            names.append(name)
        day += timedelta(days=1)
    return names
