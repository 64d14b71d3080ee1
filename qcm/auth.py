"""Identidade do chamador - resolvida pela camada de sessao upstream.

O gateway autenticado repassa ``X-User-Id`` e ``X-User-Role``; este modulo
apenas le e valida esses headers.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Depends, Header

from .exceptions import AuthenticationError, PermissionDeniedError
from .models.enums import UserRole


@dataclass(frozen=True)
class CurrentUser:
    id: str
    role: UserRole = UserRole.STUDENT

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


async def get_current_user(
    x_user_id: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
) -> CurrentUser:
    """Dependency: usuario autenticado ou 401."""
    if not x_user_id or not x_user_id.strip():
        raise AuthenticationError("Usuario nao autenticado")

    role = UserRole.STUDENT
    if x_user_role:
        try:
            role = UserRole(x_user_role.strip().upper())
        except ValueError as e:
            raise AuthenticationError(
                "Papel de usuario invalido", details={"role": x_user_role[:20]}
            ) from e

    return CurrentUser(id=x_user_id.strip(), role=role)


async def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Dependency: apenas ADMIN."""
    if not user.is_admin:
        raise PermissionDeniedError("Acesso restrito a administradores")
    return user
