"""
Data Models Package

This package contains all Pydantic models used in Registro Contable.
All data flowing through the system must conform to these schemas.
"""

from registro_contable.models.record import (
    ALLOWED_PAYMENT_METHODS,
    MAX_COUNTERPARTY_LENGTH,
    MAX_DESCRIPTION_LENGTH,
    Category,
    PaymentMethod,
    TransactionRecord,
    ValidationIssue,
    ValidationResult,
)
from registro_contable.models.forms import (
    ExpenseForm,
    IncomeForm,
    RecordForm,
    RecordFormBase,
    SupportForm,
    form_for_category,
    parse_form,
)

__all__ = [
    # Record models
    "ALLOWED_PAYMENT_METHODS",
    "MAX_COUNTERPARTY_LENGTH",
    "MAX_DESCRIPTION_LENGTH",
    "Category",
    "PaymentMethod",
    "TransactionRecord",
    "ValidationIssue",
    "ValidationResult",
    # Form models
    "ExpenseForm",
    "IncomeForm",
    "RecordForm",
    "RecordFormBase",
    "SupportForm",
    "form_for_category",
    "parse_form",
]
