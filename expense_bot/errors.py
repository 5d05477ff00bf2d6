class ExpenseFormatError(ValueError):
    """The message text is not ``<category> <amount>``."""


class StoreUnavailableError(RuntimeError):
    """A call to the spreadsheet backend failed."""
