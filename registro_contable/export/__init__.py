"""CSV export and support receipts."""

from registro_contable.export.csv_export import (
    CSV_FILENAME,
    CSV_HEADER,
    ExportFile,
    build_csv_export,
    quote_field,
    record_to_csv_row,
    records_to_csv,
)
from registro_contable.export.receipt import (
    ReceiptError,
    build_receipt,
    receipt_filename,
    render_receipt_html,
)

__all__ = [
    "CSV_FILENAME",
    "CSV_HEADER",
    "ExportFile",
    "ReceiptError",
    "build_csv_export",
    "build_receipt",
    "quote_field",
    "record_to_csv_row",
    "receipt_filename",
    "records_to_csv",
    "render_receipt_html",
]
