# app/core/auth/security.py
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError
from passlib.context import CryptContext
from pydantic import ValidationError

from app.config.settings import settings
from app.core.exceptions import AuthenticationError
from .schemas import IdentityContext, TokenPayload

# ***************************************************************
# 1. Hashing de contraseñas
# ***************************************************************

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verifica si una contraseña en texto plano coincide con el hash."""
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    """Genera el hash de una contraseña en texto plano."""
    return pwd_context.hash(password)

# ***************************************************************
# 2. Emisión y verificación de JWT
# ***************************************************************

def create_access_token(identity: IdentityContext, expires_delta: timedelta = None) -> str:
    """Crea un token de acceso con la identidad completa del usuario."""
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    expire = datetime.now(timezone.utc) + expires_delta

    to_encode = {
        "sub": str(identity.user_id),
        "empresa_id": identity.empresa_id,
        "tenant_id": identity.tenant_id,
        "rol": identity.rol,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)

def decode_token(token: str) -> IdentityContext:
    """Decodifica y valida un token JWT. Lanza AuthenticationError si falla."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
        token_data = TokenPayload(**payload)
    except (JWTError, ValidationError, TypeError) as e:
        raise AuthenticationError("Token inválido o expirado.") from e

    return IdentityContext(
        user_id=int(token_data.sub),
        empresa_id=token_data.empresa_id,
        tenant_id=token_data.tenant_id,
        rol=token_data.rol,
    )
