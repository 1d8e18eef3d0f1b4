# utils/logs.py
# ---------------------------
# Configuración centralizada de logging.
# Aplica niveles por categoría leídos del entorno para poder silenciar
# loggers ruidosos (SQL de SQLAlchemy, uvicorn) sin tocar el resto.
# Se llama una vez al arrancar, desde create_app().
# ---------------------------

import logging
import os
import sys

# Variable de entorno -> (default, loggers que controla)
_CATEGORY_MAP: dict[str, tuple[str, list[str]]] = {
    "LOG_LEVEL_SQL": (
        "WARNING",
        ["sqlalchemy.engine", "sqlalchemy.pool", "aiosqlite"],
    ),
    "LOG_LEVEL_UVICORN": (
        "INFO",
        ["uvicorn", "uvicorn.access", "uvicorn.error"],
    ),
}


def setup_logging() -> None:
    """Configura el logger raiz y los niveles por categoria."""
    root = logging.getLogger()
    root.setLevel(_parse_level(os.getenv("LOG_LEVEL", "INFO")))

    # uvicorn suele instalar su handler; en pruebas o scripts puede no haber ninguno
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            logging.Formatter("%(levelname)-8s %(name)s - %(message)s")
        )
        root.addHandler(handler)

    for variable, (default, logger_names) in _CATEGORY_MAP.items():
        level = _parse_level(os.getenv(variable, default))
        for name in logger_names:
            logging.getLogger(name).setLevel(level)

    logging.getLogger(__name__).debug(
        "Logging configurado: root=%s, sql=%s, uvicorn=%s",
        os.getenv("LOG_LEVEL", "INFO"),
        os.getenv("LOG_LEVEL_SQL", "WARNING"),
        os.getenv("LOG_LEVEL_UVICORN", "INFO"),
    )


def _parse_level(raw: str) -> int:
    """Convierte un nombre de nivel en constante de logging; INFO si no se reconoce."""
    numeric = getattr(logging, raw.upper(), None)
    if isinstance(numeric, int):
        return numeric
    return logging.INFO
