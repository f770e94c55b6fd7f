"""Form validation package."""

from registro_contable.validation.validator import (
    COMBINED_MESSAGE,
    RecordFormValidator,
)

__all__ = ["COMBINED_MESSAGE", "RecordFormValidator"]
