"""Date helpers for display, export and receipts."""

import time
from datetime import date, datetime, tzinfo


SPANISH_MONTHS = (
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
)


def format_long_date(value: date) -> str:
    """Long Spanish date: date(2024, 1, 3) -> '3 de enero de 2024'."""
    return f"{value.day} de {SPANISH_MONTHS[value.month - 1]} de {value.year}"


def format_short_date(value: date) -> str:
    """Day-first local date: date(2024, 1, 3) -> '03/01/2024'."""
    return value.strftime("%d/%m/%Y")


def millis_to_date(millis: int, tz: tzinfo) -> date:
    """Calendar date of an epoch-millisecond timestamp in the given zone."""
    return datetime.fromtimestamp(millis / 1000, tz=tz).date()


def now_millis() -> int:
    return time.time_ns() // 1_000_000


def today_in(tz: tzinfo) -> date:
    return datetime.now(tz).date()
