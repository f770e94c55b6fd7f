"""
List Presenter

Turns the live record set into display rows, most recent first.
Read-only: deleting goes through the form controller.
"""

from typing import Iterable

from pydantic import BaseModel

from registro_contable.ledger.dates import format_short_date
from registro_contable.ledger.money import format_amount
from registro_contable.models.record import Category, TransactionRecord


COUNTERPARTY_CAPTIONS = {
    Category.INCOME: "Empresa/Patrón",
    Category.EXPENSE: "Negocio",
    Category.SUPPORT: "Compañero(a)",
}


class EntryView(BaseModel):
    """One row of the records list."""

    id: str
    category: Category
    description: str
    amount_text: str
    is_positive: bool
    counterparty_text: str
    date_text: str
    payment_method_text: str
    can_generate_receipt: bool


def sort_for_display(records: Iterable[TransactionRecord]) -> list[TransactionRecord]:
    """
    Most recent first by created_at.

    Records created in the same millisecond are ordered by id so the
    list does not shuffle between refreshes.
    """
    records = sorted(records, key=lambda r: r.id or "")
    return sorted(records, key=lambda r: r.created_at, reverse=True)


def present_entry(record: TransactionRecord) -> EntryView:
    sign = "+" if record.category.is_positive else "-"
    caption = COUNTERPARTY_CAPTIONS[record.category]
    return EntryView(
        id=record.id or "",
        category=record.category,
        description=record.description,
        amount_text=f"{sign} ${format_amount(record.amount)}",
        is_positive=record.category.is_positive,
        counterparty_text=f"{caption}: {record.counterparty_name}",
        date_text=format_short_date(record.entry_date),
        payment_method_text=f"Método: {record.payment_method.value}",
        can_generate_receipt=record.category is Category.SUPPORT,
    )


def present_entries(records: Iterable[TransactionRecord]) -> list[EntryView]:
    return [present_entry(record) for record in sort_for_display(records)]
