from typing import Any, Protocol

# Column mapping: A=Type, B=Amount, C=Date, D=Note
HEADER = ["Тип расхода", "Сумма", "Дата", "Описание"]


class ExpenseStore(Protocol):
    """Monthly sheets the bot writes expenses into and reads reports from."""

    def list_partitions(self) -> list[str]:
        ...

    def ensure_partition(self, name: str) -> bool:
        """Create the sheet with header and filter unless it exists. Returns True if created."""
        ...

    def append_row(self, name: str, row: list[str]) -> None:
        ...

    def read_rows(self, name: str) -> list[list[Any]]:
        """Return all data rows below the header."""
        ...
