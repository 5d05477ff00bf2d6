"""Per-category expense totals over a reporting window."""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Iterator, NamedTuple

from expense_bot.locales import RU, Locale
from expense_bot.models import ReportWindow
from expense_bot.naming import partitions_for
from expense_bot.store import ExpenseStore

logger = logging.getLogger(__name__)

DATE_FORMATS = [
    "%Y-%m-%d",
    "%d.%m.%Y",
    "%d/%m/%Y",
    "%d-%m-%Y",
]

# Day zero of spreadsheet serial dates
SERIAL_EPOCH = date(1899, 12, 30)


class ExpenseRow(NamedTuple):
    category: str
    amount: Decimal
    date: date


@dataclass
class ScanStats:
    rows: int = 0
    skipped: int = 0


def parse_amount(value: Any) -> Decimal | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        value = str(value)
    text = str(value).strip().replace("\u00a0", "").replace(" ", "").replace(",", ".")
    try:
        amount = Decimal(text)
    except InvalidOperation:
        return None
    return amount if amount.is_finite() else None


def parse_date(value: Any) -> date | None:
    """Try the date layouts a sheet may display, or a serial day number.

    Slash dates are read day first (ru-RU display), so "3/4/2024" is 3 April.
    Serial numbers outside the representable range give None.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        try:
            return SERIAL_EPOCH + timedelta(days=int(value))
        except (OverflowError, ValueError):
            return None
    text = str(value).strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def iter_expense_rows(rows: Iterable[list[Any]], stats: ScanStats) -> Iterator[ExpenseRow]:
    """Yield readable rows; anything short or unparseable is counted in ``stats`` and dropped."""
    for row in rows:
        stats.rows += 1
        if len(row) < 3:
            stats.skipped += 1
            continue
        category = "" if row[0] is None else str(row[0])
        amount = parse_amount(row[1])
        day = parse_date(row[2])
        if not category.strip() or amount is None or day is None:
            logger.debug(f"Skipping unreadable row: {row!r}")
            stats.skipped += 1
            continue
        yield ExpenseRow(category, amount, day)


def aggregate(
    store: ExpenseStore, partitions: Iterable[str], window: ReportWindow
) -> tuple[dict[str, Decimal], bool]:
    """Sum amounts per category for rows inside ``window``.

    Returns the totals in first-seen category order and whether any of the
    scanned sheets held data rows at all, in or out of the window.
    """
    existing = set(store.list_partitions())
    totals: dict[str, Decimal] = {}
    has_any_rows = False
    stats = ScanStats()

    for name in partitions:
        if name not in existing:
            logger.debug(f"Sheet '{name}' does not exist, skipping")
            continue
        rows = store.read_rows(name)
        if not rows:
            continue
        has_any_rows = True
        for row in iter_expense_rows(rows, stats):
            if window.includes(row.date):
                totals[row.category] = totals.get(row.category, Decimal(0)) + row.amount

    if stats.skipped:
        logger.info(f"Skipped {stats.skipped} of {stats.rows} rows that could not be read")
    return totals, has_any_rows


def days_phrase(n: int) -> str:
    if n % 10 == 1 and n % 100 != 11:
        word = "день"
    elif 2 <= n % 10 <= 4 and not 12 <= n % 100 <= 14:
        word = "дня"
    else:
        word = "дней"
    return f"{n} {word}"


def render_report(window: ReportWindow, totals: dict[str, Decimal], has_any_rows: bool, currency: str) -> str:
    if not has_any_rows:
        return f"Нет данных за {window.period}."
    if not totals:
        return f"Нет расходов за {window.period}."

    lines = [f"Отчет за {window.label}, {days_phrase(window.days)}"]
    for category, amount in totals.items():
        lines.append(f"{category}: {amount}{currency}")
    lines.append(f"Всего: {sum(totals.values(), Decimal(0))}{currency}")
    return "\n".join(lines)


def build_report(store: ExpenseStore, window: ReportWindow, currency: str, locale: Locale = RU) -> str:
    totals, has_any_rows = aggregate(store, partitions_for(window.start, window.end, locale), window)
    return render_report(window, totals, has_any_rows, currency)
