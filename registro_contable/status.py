"""
User-Facing Status Message

One transient message at a time. Every new event overwrites the
previous message; there is no queue and no history.
"""

from typing import Literal, Optional

from pydantic import BaseModel


StatusLevel = Literal["info", "success", "error"]


# Messages shown to the user
MSG_INIT_FAILED = "Error al inicializar la aplicación. Intenta de nuevo."
MSG_NOT_READY = "La aplicación no está lista. Por favor, espera."
MSG_LOAD_FAILED = "Error al cargar los registros contables."
MSG_ADDED = "Registro añadido exitosamente."
MSG_ADD_FAILED = "Error al añadir el registro. Intenta de nuevo."
MSG_DELETED = "Registro eliminado exitosamente."
MSG_DELETE_FAILED = "Error al eliminar el registro. Intenta de nuevo."
MSG_NOTHING_TO_EXPORT = "No hay registros para exportar."
MSG_EXPORTED = "Registros exportados a CSV."
MSG_RECEIPT_READY = "Recibo de apoyo generado y descargado."
MSG_NO_FILE = "No se seleccionó ningún archivo."
MSG_FILE_SELECTED = (
    "Recibo seleccionado: {filename}. "
    "(Nota: La subida a Google Drive requiere un backend)"
)


class StatusMessage(BaseModel):
    """The single status slot."""

    text: Optional[str] = None
    level: StatusLevel = "info"

    def show(self, text: str, level: StatusLevel = "info") -> None:
        self.text = text
        self.level = level

    def success(self, text: str) -> None:
        self.show(text, "success")

    def error(self, text: str) -> None:
        self.show(text, "error")

    def clear(self) -> None:
        self.text = None
        self.level = "info"

    @property
    def is_error(self) -> bool:
        return self.text is not None and self.level == "error"
