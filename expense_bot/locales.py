"""Locale tables for sheet names and category labels.

Month names and labels are looked up from these tables only; the process
locale is never consulted, so results do not change with ``LANG`` or
``locale.setlocale``.
"""

import re

from pydantic import BaseModel, ConfigDict


class Locale(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    month_names: tuple[str, ...]
    payroll_advance_label: str


RU = Locale(
    code="ru",
    month_names=(
        "январь", "февраль", "март", "апрель", "май", "июнь",
        "июль", "август", "сентябрь", "октябрь", "ноябрь", "декабрь",
    ),
    payroll_advance_label="Под Зп",
)

LOCALES = {RU.code: RU}

_WORD_RE = re.compile(r"\S+")


def get_locale(code: str) -> Locale:
    try:
        return LOCALES[code.lower()]
    except KeyError:
        raise ValueError(f"Unsupported locale: {code!r} (known: {', '.join(LOCALES)})") from None


def title_case(text: str) -> str:
    """Capitalize the first character of every whitespace-delimited word and lowercase the rest.

    Unlike ``str.title`` this does not treat apostrophes or digits as word
    boundaries, and spacing between words is kept as typed.
    """
    return _WORD_RE.sub(lambda m: m.group(0)[:1].upper() + m.group(0)[1:].lower(), text)
