"""
Core Data Models for Registro Contable

These models define the strict schemas for all data flowing through the system.
They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Be serializable for storage

DESIGN DECISION: Records are immutable once stored. There is no update
operation anywhere in the system; a record is created or deleted.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Category(str, Enum):
    """
    Transaction categories.

    The category fixes the sign of the amount in the balance:
    income and support add, expense subtracts.
    """
    INCOME = "ingreso"
    EXPENSE = "gasto"
    SUPPORT = "apoyo"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def is_positive(self) -> bool:
        """Does this category increase the balance?"""
        return self is not Category.EXPENSE


class PaymentMethod(str, Enum):
    """How the money moved. Stored by its display label."""
    CASH = "Efectivo"
    TRANSFER = "Transferencia"
    CARD = "Tarjeta"


# Payment methods each category accepts. Cash is always first (the default).
ALLOWED_PAYMENT_METHODS: dict[Category, tuple[PaymentMethod, ...]] = {
    Category.INCOME: (PaymentMethod.CASH, PaymentMethod.TRANSFER),
    Category.EXPENSE: (PaymentMethod.CASH, PaymentMethod.CARD),
    Category.SUPPORT: (PaymentMethod.CASH, PaymentMethod.TRANSFER),
}


# Free text limits, also enforced by the form validator
MAX_DESCRIPTION_LENGTH = 500
MAX_COUNTERPARTY_LENGTH = 200


# =============================================================================
# CORE RECORD MODEL
# =============================================================================

class TransactionRecord(BaseModel):
    """
    A single bookkeeping entry.

    `id` is assigned by the record store; a record built by the form
    has no id until it is created. `created_at` is epoch milliseconds
    and only drives recency ordering; `entry_date` is the date the user
    picked.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: Optional[str] = Field(
        default=None,
        description="Store-assigned identifier"
    )
    description: str = Field(
        ...,
        min_length=1,
        max_length=MAX_DESCRIPTION_LENGTH,
        description="Concept / description"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        allow_inf_nan=False,
        description="Positive amount; the category gives the sign"
    )
    category: Category
    counterparty_name: str = Field(
        ...,
        min_length=1,
        max_length=MAX_COUNTERPARTY_LENGTH,
        description="Employer, vendor or companion depending on category"
    )
    entry_date: date
    payment_method: PaymentMethod
    created_at: int = Field(
        ...,
        ge=0,
        description="Creation time in epoch milliseconds"
    )

    @model_validator(mode='after')
    def validate_payment_method(self) -> 'TransactionRecord':
        """The payment method must be one the category accepts."""
        allowed = ALLOWED_PAYMENT_METHODS[self.category]
        if self.payment_method not in allowed:
            raise ValueError(
                f"Payment method {self.payment_method.value} is not valid for "
                f"{self.category.value}"
            )
        return self

    @property
    def signed_amount(self) -> Decimal:
        """Amount with the category sign applied."""
        return self.amount if self.category.is_positive else -self.amount

    def with_id(self, record_id: str) -> 'TransactionRecord':
        """Copy of this record carrying the store-assigned id."""
        return self.model_copy(update={"id": record_id})


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found on a form."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )


class ValidationResult(BaseModel):
    """
    Result of validating a form before submission.

    Any issue blocks submission; there are no warnings.
    """

    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.issues

    @property
    def fields(self) -> list[str]:
        return [issue.field for issue in self.issues]
