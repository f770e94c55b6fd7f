"""
Support Receipts

Renders one support ("apoyo") record as a standalone HTML voucher.
The receipt is a download only; generating it never touches the
record store.
"""

import re
from html import escape

from registro_contable.export.csv_export import ExportFile
from registro_contable.ledger.dates import format_long_date
from registro_contable.ledger.money import format_amount
from registro_contable.models.record import Category, TransactionRecord


RECEIPT_MIME_TYPE = "text/html"

RECEIPT_TEMPLATE = """<!DOCTYPE html>
<html lang="es">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Recibo de Apoyo - {title}</title>
    <style>
        body {{ font-family: 'Inter', sans-serif; line-height: 1.6; color: #333; margin: 20px; }}
        .container {{ max-width: 600px; margin: 0 auto; padding: 30px; border: 1px solid #eee; box-shadow: 0 0 10px rgba(0,0,0,0.05); }}
        h1 {{ text-align: center; color: #4F46E5; margin-bottom: 30px; }}
        .details p {{ margin: 5px 0; }}
        .amount {{ font-size: 2em; font-weight: bold; text-align: center; color: #10B981; margin-top: 30px; }}
        .footer {{ text-align: center; margin-top: 50px; font-size: 0.9em; color: #777; }}
    </style>
</head>
<body>
    <div class="container">
        <h1>Recibo de Apoyo</h1>
        <div class="details">
            <p><strong>Fecha:</strong> {date}</p>
            <p><strong>Concepto:</strong> {description}</p>
            <p><strong>Nombre:</strong> {name}</p>
            <p><strong>Tipo de Apoyo:</strong> {payment_method}</p>
        </div>
        <div class="amount">
            Monto: ${amount} {currency}
        </div>
        <div class="footer">
            <p>Recibo generado automáticamente por la aplicación.</p>
        </div>
    </div>
</body>
</html>
"""


class ReceiptError(ValueError):
    """Receipts exist only for support records."""
    pass


def receipt_filename(record: TransactionRecord) -> str:
    """recibo_apoyo_<description, whitespace as _>_<YYYY-MM-DD>.html"""
    description = re.sub(r"\s", "_", record.description)
    return f"recibo_apoyo_{description}_{record.entry_date.isoformat()}.html"


def render_receipt_html(record: TransactionRecord, currency: str = "MXN") -> str:
    return RECEIPT_TEMPLATE.format(
        title=escape(record.description),
        date=format_long_date(record.entry_date),
        description=escape(record.description),
        name=escape(record.counterparty_name),
        payment_method=escape(record.payment_method.value),
        amount=format_amount(record.amount),
        currency=escape(currency),
    )


def build_receipt(record: TransactionRecord, currency: str = "MXN") -> ExportFile:
    """
    Build the receipt download for a support record.

    Raises:
        ReceiptError: If the record is not a support entry
    """
    if record.category is not Category.SUPPORT:
        raise ReceiptError(
            f"Receipts are only generated for support entries, not {record.category.value}"
        )
    return ExportFile(
        filename=receipt_filename(record),
        content=render_receipt_html(record, currency),
        mime_type=RECEIPT_MIME_TYPE,
    )
