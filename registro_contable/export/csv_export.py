"""
CSV Export

Writes the record set as UTF-8 CSV, one row per record, in the order
the records were given (the display sort is not applied).

Description and entity name are always double-quoted with inner
quotes doubled; they are free text and may contain commas. The other
columns never do.
"""

from datetime import tzinfo
from typing import Iterable, Literal, Optional

from pydantic import BaseModel

from registro_contable.ledger.dates import format_short_date, millis_to_date
from registro_contable.ledger.money import format_amount
from registro_contable.models.record import TransactionRecord


CSV_FILENAME = "registros_contables.csv"
CSV_MIME_TYPE = "text/csv;charset=utf-8"
CSV_HEADER = ["ID", "Fecha", "Descripción", "Monto", "Tipo", "Entidad", "Método de Pago"]


class ExportFile(BaseModel):
    """A generated file ready to download."""

    filename: str
    content: str
    mime_type: str

    @property
    def data(self) -> bytes:
        return self.content.encode("utf-8")


def quote_field(value: Optional[str]) -> str:
    """Double-quote a value, doubling inner quotes."""
    return '"' + (value or "").replace('"', '""') + '"'


def record_to_csv_row(
    record: TransactionRecord,
    tz: tzinfo,
    date_source: Literal["created_at", "entry_date"] = "created_at",
) -> list[str]:
    if date_source == "entry_date":
        row_date = record.entry_date
    else:
        row_date = millis_to_date(record.created_at, tz)

    return [
        record.id or "",
        format_short_date(row_date),
        quote_field(record.description),
        format_amount(record.amount),
        record.category.value,
        quote_field(record.counterparty_name),
        record.payment_method.value,
    ]


def records_to_csv(
    records: Iterable[TransactionRecord],
    tz: tzinfo,
    date_source: Literal["created_at", "entry_date"] = "created_at",
) -> str:
    """Header plus one line per record, joined with '\\n' (no trailing newline)."""
    lines = [",".join(CSV_HEADER)]
    for record in records:
        lines.append(",".join(record_to_csv_row(record, tz, date_source)))
    return "\n".join(lines)


def build_csv_export(
    records: list[TransactionRecord],
    tz: tzinfo,
    date_source: Literal["created_at", "entry_date"] = "created_at",
) -> Optional[ExportFile]:
    """The downloadable CSV, or None when there is nothing to export."""
    if not records:
        return None
    return ExportFile(
        filename=CSV_FILENAME,
        content=records_to_csv(records, tz, date_source),
        mime_type=CSV_MIME_TYPE,
    )
