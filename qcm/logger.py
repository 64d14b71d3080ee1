"""Logger estruturado - wrapper fino sobre logging da stdlib.

Permite chamadas no estilo:

    logger = get_logger("quiz")
    logger.info("Quiz iniciado", attempt_id=attempt_id, count=10)

Os campos extras sao renderizados como sufixo ``key=value``.
"""

from __future__ import annotations

import logging
from typing import Any

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_RESERVED = {"exc_info", "stack_info", "stacklevel", "extra"}


class StructuredLogger(logging.LoggerAdapter):
    """LoggerAdapter que aceita kwargs arbitrarios como campos."""

    def process(self, msg: Any, kwargs: dict[str, Any]) -> tuple[Any, dict[str, Any]]:
        fields = {k: kwargs.pop(k) for k in list(kwargs) if k not in _RESERVED}
        if fields:
            rendered = " ".join(f"{k}={v}" for k, v in fields.items())
            msg = f"{msg} | {rendered}"
        return msg, kwargs


def get_logger(name: str) -> StructuredLogger:
    """Retorna logger estruturado no namespace ``qcm``."""
    return StructuredLogger(logging.getLogger(f"qcm.{name}"), {})


def configure_logging(level: str = "INFO") -> None:
    """Configura handler raiz a partir do LOG_LEVEL."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger("qcm").setLevel(level.upper())
