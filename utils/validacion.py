# utils/validacion.py
# ---------------------------
# Tipos de validación compartidos por los schemas Pydantic.
# ---------------------------

from typing import Annotated

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator


def _validar_email(valor: str) -> str:
    # Se valida el formato pero se guarda tal cual llegó (sin normalizar mayúsculas)
    try:
        validate_email(valor, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(f"Email no válido: {e}") from e
    return valor


Email = Annotated[str, AfterValidator(_validar_email)]
