"""Shared fixtures.

Tests never talk to Google or Telegram: the spreadsheet is replaced by
``InMemoryStore`` and the service is pinned to a fixed timezone so that
"today" and received dates are deterministic.
"""

from __future__ import annotations

import pytest

from expense_bot.router import MessageRouter
from expense_bot.service import ExpenseService
from tests.helpers.store import InMemoryStore


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def service(store: InMemoryStore) -> ExpenseService:
    return ExpenseService(store, currency="₽", tz="Europe/Moscow")


@pytest.fixture
def router(service: ExpenseService) -> MessageRouter:
    return MessageRouter(service, bot_username="TochkaExpenseBot")
