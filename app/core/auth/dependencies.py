# app/core/auth/dependencies.py
from typing import Iterable, Optional

from fastapi import Depends, Header

from app.core.exceptions import AuthenticationError, AuthorizationError
from .schemas import IdentityContext
from .security import decode_token


def get_identity(authorization: Optional[str] = Header(None)) -> IdentityContext:
    """Extraer la identidad del header Authorization: Bearer <token>"""
    if not authorization or not authorization.lower().startswith("bearer "):
        raise AuthenticationError("Acceso denegado. No se proporcionó Token.")

    token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise AuthenticationError("Acceso denegado. No se proporcionó Token.")

    return decode_token(token)


def check_roles(identity: IdentityContext, roles: Iterable[str]) -> IdentityContext:
    """Única verificación de capacidades: el rol debe estar en el conjunto permitido"""
    allowed = {getattr(r, "value", r) for r in roles}
    if identity.rol not in allowed:
        raise AuthorizationError("Acceso denegado. Rol no autorizado.")
    return identity


def require_roles(roles: Iterable[str]):
    """Dependencia FastAPI que exige uno de los roles indicados"""
    roles = list(roles)

    def _dependency(identity: IdentityContext = Depends(get_identity)) -> IdentityContext:
        return check_roles(identity, roles)

    return _dependency


def require_tenant(identity: IdentityContext) -> int:
    """Devolver empresa_id de la identidad o fallar si la identidad no tiene empresa"""
    if identity.empresa_id is None:
        raise AuthorizationError("Acción no permitida para SuperAdmin en esta ruta.")
    return identity.empresa_id
