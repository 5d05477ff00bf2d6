from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from expense_bot.errors import ExpenseFormatError
from expense_bot.report import aggregate
from expense_bot.models import WeekWindow
from expense_bot.store import HEADER


def test_add_expense_creates_month_sheet_and_appends(service, store):
    expense, sheet = service.add_expense("продукты 500", date(2024, 3, 15))

    assert sheet == "март 2024"
    assert store.created == ["март 2024"]
    assert store.sheets["март 2024"] == [HEADER, ["Продукты", "500", "2024-03-15", ""]]
    assert expense.category == "Продукты"


def test_second_expense_reuses_sheet(service, store):
    service.add_expense("Кофе 150", date(2024, 3, 15))
    service.add_expense("Под ЗП 5000 Иван Петров", date(2024, 3, 16))

    assert store.created == ["март 2024"]
    assert store.sheets["март 2024"][-1] == ["Под Зп", "5000", "2024-03-16", "Иван Петров"]


def test_bad_text_writes_nothing(service, store):
    with pytest.raises(ExpenseFormatError):
        service.add_expense("просто текст", date(2024, 3, 15))
    assert store.sheets == {}


def test_recorded_expense_shows_up_in_aggregate(service, store):
    service.add_expense("Канцелярия 199.99", date(2024, 3, 15))

    window = WeekWindow.containing(date(2024, 3, 15))
    totals, has_any_rows = aggregate(store, ["март 2024"], window)

    assert has_any_rows
    assert totals == {"Канцелярия": Decimal("199.99")}


def test_weekly_and_monthly_reports(service):
    service.add_expense("Такси 300", date(2024, 2, 20))
    service.add_expense("Такси 200", date(2024, 3, 12))
    service.add_expense("Обед 450.50", date(2024, 3, 13))

    weekly = service.weekly_report(today=date(2024, 3, 14))
    assert weekly.splitlines()[1:] == ["Такси: 200₽", "Обед: 450.50₽", "Всего: 650.50₽"]

    monthly = service.monthly_report(today=date(2024, 3, 14))
    assert monthly.splitlines()[1:] == ["Такси: 300₽", "Всего: 300₽"]


def test_local_date_uses_configured_timezone(service):
    # 22:30 UTC on the 14th is already the 15th in Moscow
    assert service.local_date(datetime(2024, 3, 14, 22, 30, tzinfo=timezone.utc)) == date(2024, 3, 15)
    assert service.local_date(datetime(2024, 3, 14, 20, 0)) == date(2024, 3, 14)
