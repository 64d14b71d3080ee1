"""Excecoes do QCM - Taxonomia de erros do motor de quiz."""

from __future__ import annotations

from typing import Any


class QcmError(Exception):
    """Erro base do QCM.

    Attributes:
        message: Mensagem legivel
        details: Contexto adicional (serializavel em JSON)
    """

    code = "internal_error"
    status_code = 500

    def __init__(self, message: str = "", details: dict[str, Any] | None = None):
        self.message = message or self.__class__.__doc__ or self.code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.code, "message": self.message, "details": self.details}


class ValidationError(QcmError):
    """Parametros invalidos."""

    code = "validation_error"
    status_code = 400


class AuthenticationError(QcmError):
    """Usuario nao autenticado."""

    code = "unauthorized"
    status_code = 401


class PermissionDeniedError(QcmError):
    """Acesso negado."""

    code = "forbidden"
    status_code = 403


class NotFoundError(QcmError):
    """Recurso nao encontrado."""

    code = "not_found"
    status_code = 404


class ConflictError(QcmError):
    """Operacao conflita com o estado atual do recurso."""

    code = "conflict"
    status_code = 409
