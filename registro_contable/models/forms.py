"""
Record Form Models

The in-progress record is a tagged union over three form shapes.
Each shape knows its own labels, its allowed payment methods and its
default description. Field values stay as the user typed them (the
amount is text) until the form is validated and turned into a
TransactionRecord.
"""

from datetime import date
from typing import Annotated, ClassVar, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from registro_contable.ledger.money import parse_amount
from registro_contable.models.record import (
    ALLOWED_PAYMENT_METHODS,
    Category,
    PaymentMethod,
    TransactionRecord,
)


class RecordFormBase(BaseModel):
    """Fields shared by every form shape."""
    model_config = ConfigDict(validate_assignment=True)

    # Display labels, overridden per shape
    counterparty_label: ClassVar[str] = "Nombre"
    counterparty_placeholder: ClassVar[str] = ""
    description_label: ClassVar[str] = "Concepto"
    description_placeholder: ClassVar[str] = ""
    payment_method_label: ClassVar[str] = "Tipo:"
    default_description: ClassVar[str] = ""

    description: str = ""
    counterparty_name: str = ""
    amount: str = ""
    entry_date: Optional[date] = Field(default_factory=date.today)
    payment_method: PaymentMethod = PaymentMethod.CASH

    @classmethod
    def allowed_payment_methods(cls) -> tuple[PaymentMethod, ...]:
        return ALLOWED_PAYMENT_METHODS[cls.model_fields["category"].default]

    @field_validator('payment_method')
    @classmethod
    def validate_payment_method(cls, v: PaymentMethod) -> PaymentMethod:
        if v not in cls.allowed_payment_methods():
            raise ValueError(
                f"{v.value} is not available here; choose one of "
                f"{', '.join(m.value for m in cls.allowed_payment_methods())}"
            )
        return v

    @classmethod
    def blank(cls, today: date) -> "RecordFormBase":
        """A fresh form with the per-category defaults."""
        return cls(
            description=cls.default_description,
            counterparty_name="",
            amount="",
            entry_date=today,
            payment_method=PaymentMethod.CASH,
        )

    def to_record(self, created_at: int) -> TransactionRecord:
        """
        Build the record to submit.

        Call only after validation passed; a bad field raises here.
        """
        return TransactionRecord(
            description=self.description,
            amount=parse_amount(self.amount),
            category=self.category,
            counterparty_name=self.counterparty_name,
            entry_date=self.entry_date,
            payment_method=self.payment_method,
            created_at=created_at,
        )


class IncomeForm(RecordFormBase):
    counterparty_label: ClassVar[str] = "Empresa"
    counterparty_placeholder: ClassVar[str] = "Nombre del patrón"
    description_label: ClassVar[str] = "Concepto"
    description_placeholder: ClassVar[str] = "Descripción (ej. Cuotas, Apoyo)"
    payment_method_label: ClassVar[str] = "Elige tipo de ingreso:"

    category: Literal[Category.INCOME] = Category.INCOME


class ExpenseForm(RecordFormBase):
    counterparty_label: ClassVar[str] = "Negocio o establecimiento"
    counterparty_placeholder: ClassVar[str] = "ej. Office Depot"
    description_label: ClassVar[str] = "Descripción"
    description_placeholder: ClassVar[str] = "ej. Papel, plumas, toner"
    payment_method_label: ClassVar[str] = "Tipo:"

    category: Literal[Category.EXPENSE] = Category.EXPENSE


class SupportForm(RecordFormBase):
    counterparty_label: ClassVar[str] = "Nombre"
    counterparty_placeholder: ClassVar[str] = "Juan Pérez"
    description_label: ClassVar[str] = "Concepto"
    description_placeholder: ClassVar[str] = "Apoyo (default)"
    payment_method_label: ClassVar[str] = "Tipo de apoyo:"
    default_description: ClassVar[str] = "Apoyo"

    category: Literal[Category.SUPPORT] = Category.SUPPORT


RecordForm = Annotated[
    Union[IncomeForm, ExpenseForm, SupportForm],
    Field(discriminator="category"),
]

FORM_CLASSES: dict[Category, type[RecordFormBase]] = {
    Category.INCOME: IncomeForm,
    Category.EXPENSE: ExpenseForm,
    Category.SUPPORT: SupportForm,
}

_record_form_adapter = TypeAdapter(RecordForm)


def form_for_category(category: Category, today: date) -> RecordFormBase:
    """Blank form of the right shape for a category."""
    return FORM_CLASSES[Category(category)].blank(today)


def parse_form(data: dict) -> RecordFormBase:
    """Rebuild a form from plain data (e.g. UI session state)."""
    return _record_form_adapter.validate_python(data)
