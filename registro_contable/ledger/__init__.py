"""Balance, money/date formatting and list presentation."""

from registro_contable.ledger.money import (
    format_amount,
    format_money,
    parse_amount,
)
from registro_contable.ledger.dates import (
    format_long_date,
    format_short_date,
    millis_to_date,
    now_millis,
    today_in,
)
from registro_contable.ledger.balance import compute_balance
from registro_contable.ledger.presenter import (
    EntryView,
    present_entries,
    present_entry,
    sort_for_display,
)

__all__ = [
    "EntryView",
    "compute_balance",
    "format_amount",
    "format_long_date",
    "format_money",
    "format_short_date",
    "millis_to_date",
    "now_millis",
    "parse_amount",
    "present_entries",
    "present_entry",
    "sort_for_display",
    "today_in",
]
