import datetime
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from expense_bot.locales import RU, Locale
from expense_bot.naming import partition_name


class ExpenseRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: str = Field(..., min_length=1, description="Title-cased expense category")
    amount: Decimal = Field(..., ge=0, decimal_places=2, description="Expense amount")
    date: datetime.date = Field(..., description="Day the message was received, local time")
    note: str = Field("", description="Employee name for payroll advances")

    def to_row(self) -> list[str]:
        return [self.category, str(self.amount), self.date.isoformat(), self.note]


class ReportWindow(BaseModel):
    """A reporting period.

    ``period`` is the phrase used in "nothing found" replies, ``label`` heads
    the report itself. Subclasses decide which row dates belong to the window.
    """

    model_config = ConfigDict(frozen=True)

    start: date
    end: date
    period: str
    label: str

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1

    def includes(self, day: date) -> bool:
        raise NotImplementedError


class WeekWindow(ReportWindow):
    """ISO week, Monday through Sunday."""

    @classmethod
    def containing(cls, today: date) -> "WeekWindow":
        start = today - timedelta(days=today.weekday())
        end = start + timedelta(days=6)
        return cls(
            start=start,
            end=end,
            period="эту неделю",
            label=f"неделю ({start:%d.%m} - {end:%d.%m})",
        )

    def includes(self, day: date) -> bool:
        return self.start <= day <= self.end


class MonthWindow(ReportWindow):
    """A whole calendar month; rows match on (month, year) rather than a range."""

    year: int
    month: int

    @classmethod
    def previous(cls, today: date, locale: Locale = RU) -> "MonthWindow":
        end = today.replace(day=1) - timedelta(days=1)
        start = end.replace(day=1)
        return cls(
            start=start,
            end=end,
            year=start.year,
            month=start.month,
            period="прошлый месяц",
            label=f"прошлый месяц ({partition_name(start, locale)})",
        )

    def includes(self, day: date) -> bool:
        return day.month == self.month and day.year == self.year


# ── HTTP API payloads ────────────────────────────────────────────────────

class ExpenseRequest(BaseModel):
    text: str = Field(..., description="Expense in chat form, e.g. 'Продукты 500'")
    date: Optional[datetime.date] = Field(None, description="Day of the expense. Defaults to today")


class ExpenseResponse(BaseModel):
    status: str
    message: str
    sheet: str
    expense: ExpenseRecord


class ReportResponse(BaseModel):
    text: str
