"""
Form Validation

Checks a record form before it is submitted. Every rule must hold;
otherwise the submission is rejected as a whole with one combined
message and nothing reaches the record store.

Rules:
- description is not empty and at most MAX_DESCRIPTION_LENGTH characters
- counterparty name is not empty and at most MAX_COUNTERPARTY_LENGTH characters
- amount parses to a finite number, at least one cent once rounded, and
  no larger than MAX_AMOUNT
- entry date is set

IMPORTANT: Validation NEVER silently fixes issues.
It reports them and the user corrects the form.
"""

from registro_contable.ledger.money import MAX_AMOUNT, parse_amount, quantize_amount
from registro_contable.models.forms import RecordFormBase
from registro_contable.models.record import (
    MAX_COUNTERPARTY_LENGTH,
    MAX_DESCRIPTION_LENGTH,
    ValidationIssue,
    ValidationResult,
)


COMBINED_MESSAGE = (
    "Por favor, completa todos los campos requeridos y asegúrate de que "
    "el monto sea válido."
)


class RecordFormValidator:
    """Validates a record form of any shape."""

    def validate(self, form: RecordFormBase) -> ValidationResult:
        issues = []

        issues.extend(self._check_text(
            "description",
            form.description,
            form.description_label,
            MAX_DESCRIPTION_LENGTH,
        ))
        issues.extend(self._check_text(
            "counterparty_name",
            form.counterparty_name,
            form.counterparty_label,
            MAX_COUNTERPARTY_LENGTH,
        ))

        amount = parse_amount(form.amount)
        if not form.amount.strip():
            issues.append(ValidationIssue(
                field="amount",
                issue_type="missing",
                message="El monto es obligatorio",
            ))
        elif amount is None:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message=f"El monto '{form.amount}' no es un número",
            ))
        elif amount <= 0 or quantize_amount(amount) == 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="El monto debe ser de al menos 0.01",
            ))
        elif amount > MAX_AMOUNT:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="too_large",
                message=f"El monto no puede superar {MAX_AMOUNT}",
            ))

        if form.entry_date is None:
            issues.append(ValidationIssue(
                field="entry_date",
                issue_type="missing",
                message="La fecha es obligatoria",
            ))

        return ValidationResult(issues=issues)

    def _check_text(
        self,
        field: str,
        value: str,
        label: str,
        max_length: int,
    ) -> list[ValidationIssue]:
        """Required free text, measured the way the stored record strips it."""
        text = value.strip()
        if not text:
            return [ValidationIssue(
                field=field,
                issue_type="missing",
                message=f"{label} es obligatorio",
            )]
        if len(text) > max_length:
            return [ValidationIssue(
                field=field,
                issue_type="too_long",
                message=f"{label} admite hasta {max_length} caracteres",
            )]
        return []

    def get_user_message(self, result: ValidationResult) -> str:
        """The single status line shown when validation fails."""
        if result.is_valid:
            return ""
        return COMBINED_MESSAGE
