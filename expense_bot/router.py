"""Decide what an incoming chat message is and produce the reply text."""

import logging
from datetime import date

from expense_bot.errors import ExpenseFormatError
from expense_bot.models import ExpenseRecord
from expense_bot.service import ExpenseService

logger = logging.getLogger(__name__)

WEEKLY_REPORT_COMMAND = "/weaklyreport"
MONTHLY_REPORT_COMMAND = "/monthlyreport"
HELP_COMMANDS = ("/start", "/help")

USAGE_HINT = (
    "Пожалуйста, введите расход в формате: <категория> <сумма> (например: Продукты 500) "
    "или <категория> <сумма> <имя сотрудника> для 'Под ЗП'"
)

WELCOME_TEXT = (
    "Я записываю расходы в Google таблицу, по листу на каждый месяц.\n\n"
    "Отправьте расход сообщением:\n"
    "  Продукты 500\n"
    "  Канцелярия 199.99\n"
    "  Под ЗП 10000 Иван Петров\n\n"
    f"{WEEKLY_REPORT_COMMAND} - расходы за текущую неделю\n"
    f"{MONTHLY_REPORT_COMMAND} - расходы за прошлый месяц"
)


def format_confirmation(expense: ExpenseRecord, currency: str) -> str:
    text = f"Расход успешно добавлен: {expense.category} - {expense.amount}{currency} ({expense.date.isoformat()})"
    if expense.note.strip():
        text += f" для сотрудника: {expense.note}"
    return text


class MessageRouter:
    def __init__(self, service: ExpenseService, bot_username: str = ""):
        self.service = service
        self.bot_username = bot_username

    def command_for(self, text: str) -> str | None:
        """Return the bare command if ``text`` is one addressed to this bot, else None."""
        token = text.strip().lower()
        if not token.startswith("/") or any(c.isspace() for c in token):
            return None
        command, _, mention = token.partition("@")
        if mention and mention != self.bot_username.lstrip("@").lower():
            return None
        return command

    def handle(self, text: str, received_on: date) -> str:
        command = self.command_for(text)
        if command == WEEKLY_REPORT_COMMAND:
            return self.service.weekly_report()
        if command == MONTHLY_REPORT_COMMAND:
            return self.service.monthly_report()
        if command in HELP_COMMANDS:
            return WELCOME_TEXT

        try:
            expense, _ = self.service.add_expense(text, received_on)
        except ExpenseFormatError:
            logger.info(f"Unrecognised message: {text!r}")
            return USAGE_HINT
        return format_confirmation(expense, self.service.currency)
