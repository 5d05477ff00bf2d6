"""Turn chat messages like ``"Продукты 500"`` into expense records."""

import re
from datetime import date
from decimal import Decimal

from expense_bot.errors import ExpenseFormatError
from expense_bot.locales import RU, Locale, title_case
from expense_bot.models import ExpenseRecord

AMOUNT = r"\d+(?:\.\d{1,2})?"
EXPENSE_RE = re.compile(rf"^(.+?)\s+({AMOUNT})$", re.IGNORECASE)


def _payroll_advance_re(locale: Locale) -> re.Pattern:
    label = r"\s+".join(re.escape(word) for word in locale.payroll_advance_label.split())
    return re.compile(rf"^({label})\s+({AMOUNT})(?:\s+(.+))?$", re.IGNORECASE | re.DOTALL)


def parse_expense(text: str, received_on: date, locale: Locale = RU) -> ExpenseRecord:
    """Parse ``<category> <amount>``; the amount is the last token and has at most two decimals.

    The payroll-advance category takes a third piece after the amount: the
    employee name, kept as one string however many words it has.
    """
    text = (text or "").strip()

    match = _payroll_advance_re(locale).match(text)
    if match:
        return ExpenseRecord(
            category=locale.payroll_advance_label,
            amount=Decimal(match.group(2)),
            date=received_on,
            note=(match.group(3) or "").strip(),
        )

    match = EXPENSE_RE.match(text)
    if not match:
        raise ExpenseFormatError(f"Not an expense: {text!r}")

    return ExpenseRecord(
        category=title_case(match.group(1)),
        amount=Decimal(match.group(2)),
        date=received_on,
    )
