#!/usr/bin/env python3
"""
Crear el usuario super_admin global (sin empresa).

Variables de entorno:
- SUPER_ADMIN_EMAIL (obligatoria)
- SUPER_ADMIN_PASSWORD (si falta se genera una y se imprime)
- SUPER_ADMIN_NOMBRE (opcional)

Es idempotente: si el correo ya existe no hace nada.
"""
import os
import secrets
import sys

from app.config.database import Base, SessionLocal, engine
from app.core.auth.schemas import Rol
from app.core.auth.security import get_password_hash
from app.modules.empresas.repository import EmpresasRepository


def bootstrap_super_admin(db, email: str, password: str, nombre: str = "Administración Central") -> bool:
    """Devuelve True si creó el usuario, False si ya existía"""
    repository = EmpresasRepository(db)
    if repository.get_usuario_por_correo(email):
        return False

    repository.create_usuario(
        empresa_id=None,
        nombre=nombre,
        correo_electronico=email,
        password_hash=get_password_hash(password),
        rol=Rol.SUPER_ADMIN.value,
        necesita_cambio_pw=False
    )
    db.commit()
    return True


def main() -> int:
    email = (os.getenv("SUPER_ADMIN_EMAIL") or "").strip().lower()
    if not email:
        print("bootstrap_super_admin: missing SUPER_ADMIN_EMAIL", file=sys.stderr)
        return 2

    password = os.getenv("SUPER_ADMIN_PASSWORD")
    generated_password = False
    if not password:
        password = secrets.token_urlsafe(16)
        generated_password = True

    nombre = (os.getenv("SUPER_ADMIN_NOMBRE") or "").strip() or "Administración Central"

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        created = bootstrap_super_admin(db, email, password, nombre)
    finally:
        db.close()

    if not created:
        print(f"bootstrap_super_admin: {email} ya existe")
        return 0

    print(f"bootstrap_super_admin: creado {email}")
    if generated_password:
        print(f"bootstrap_super_admin: contraseña generada: {password}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
