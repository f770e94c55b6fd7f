"""
Balance Calculator

The balance is recomputed from the full record set on every change.
Income and support add to it, expenses subtract from it.

DESIGN DECISION: a stored amount that is not a finite number
contributes zero and is logged. One bad row must not turn the whole
balance into NaN or hide it behind an exception.
"""

from decimal import Decimal
from typing import Iterable

from registro_contable.ledger.money import parse_amount
from registro_contable.log import get_logger
from registro_contable.models.record import Category, TransactionRecord


logger = get_logger(__name__)


def compute_balance(records: Iterable[TransactionRecord]) -> Decimal:
    """
    Reduce a record set to its signed total.

    Order does not matter. An empty set gives Decimal("0").
    """
    total = Decimal("0")
    for record in records:
        amount = parse_amount(record.amount)
        if amount is None:
            logger.warning(
                "balance_amount_skipped",
                record_id=record.id,
                amount=repr(record.amount),
            )
            continue
        if Category(record.category).is_positive:
            total += amount
        else:
            total -= amount
    return total
