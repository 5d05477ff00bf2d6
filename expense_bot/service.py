import logging
from datetime import date, datetime
from zoneinfo import ZoneInfo

from expense_bot.config import Settings
from expense_bot.locales import RU, Locale, get_locale
from expense_bot.models import ExpenseRecord, MonthWindow, WeekWindow
from expense_bot.naming import partition_name
from expense_bot.parser import parse_expense
from expense_bot.report import build_report
from expense_bot.sheets_client import SheetsClient, load_credentials
from expense_bot.store import ExpenseStore

logger = logging.getLogger(__name__)


class ExpenseService:
    def __init__(self, store: ExpenseStore, locale: Locale = RU, currency: str = "₽", tz: str = "Europe/Moscow"):
        self.store = store
        self.locale = locale
        self.currency = currency
        self.tz = ZoneInfo(tz)

    def today(self) -> date:
        return datetime.now(self.tz).date()

    def local_date(self, moment: datetime) -> date:
        """Calendar day of ``moment`` in the bot's timezone. Naive datetimes are taken as UTC."""
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=ZoneInfo("UTC"))
        return moment.astimezone(self.tz).date()

    def add_expense(self, text: str, received_on: date) -> tuple[ExpenseRecord, str]:
        """Parse ``text`` and append it to its month sheet. Returns the record and the sheet name."""
        expense = parse_expense(text, received_on, self.locale)
        sheet_name = partition_name(expense.date, self.locale)

        if self.store.ensure_partition(sheet_name):
            logger.info(f"Started new month sheet '{sheet_name}'")
        self.store.append_row(sheet_name, expense.to_row())
        logger.info(f"Recorded {expense.category} {expense.amount} in '{sheet_name}'")
        return expense, sheet_name

    def weekly_report(self, today: date | None = None) -> str:
        window = WeekWindow.containing(today or self.today())
        return build_report(self.store, window, self.currency, self.locale)

    def monthly_report(self, today: date | None = None) -> str:
        window = MonthWindow.previous(today or self.today(), self.locale)
        return build_report(self.store, window, self.currency, self.locale)

    @classmethod
    def from_settings(cls, config: Settings, store: ExpenseStore | None = None) -> "ExpenseService":
        if store is None:
            store = SheetsClient(config.google_sheets_spreadsheet_id, load_credentials(config))
        return cls(store, get_locale(config.locale), config.currency, config.timezone)
