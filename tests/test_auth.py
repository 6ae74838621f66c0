"""Registro de empresas, inicio de sesión y control de acceso"""
from datetime import timedelta

import pytest
from jose import jwt

from conftest import API, PASSWORD, auth_headers, login, register_tenant

from app.core.auth.dependencies import check_roles
from app.core.auth.schemas import IdentityContext, Rol
from app.core.auth.security import create_access_token, decode_token
from app.core.exceptions import AuthenticationError, AuthorizationError
from app.shared.database.models import Cliente, Empresa, Usuario, Vendedor


def test_registro_crea_empresa_admin_y_defaults(client, db):
    r = register_tenant(client, "acme", "admin.acme@gmail.com")

    assert r.json() == {
        "success": True,
        "message": "Empresa y administrador principal creados exitosamente.",
        "tenant_id": "acme",
    }
    empresa = db.query(Empresa).filter(Empresa.tenant_id == "acme").one()
    admin = db.query(Usuario).filter(Usuario.empresa_id == empresa.id).one()
    assert admin.rol == "administrador"
    assert admin.password_hash != PASSWORD
    assert [c.nombre for c in db.query(Cliente).filter(Cliente.empresa_id == empresa.id)] == ["público general"]
    assert [v.nombre for v in db.query(Vendedor).filter(Vendedor.empresa_id == empresa.id)] == ["administrador"]


def test_registro_tenant_duplicado(client):
    register_tenant(client, "acme", "admin.acme@gmail.com")

    r = client.post(f"{API}/auth/register", json={
        "tenant_id": "acme",
        "nombre_empresa": "Otra",
        "nombre_admin": "Otro",
        "correo_electronico": "otro@gmail.com",
        "password": PASSWORD,
    })

    assert r.status_code == 409
    assert "acme" in r.json()["message"]


def test_registro_correo_duplicado(client):
    register_tenant(client, "acme", "admin.acme@gmail.com")

    r = client.post(f"{API}/auth/register", json={
        "tenant_id": "otra",
        "nombre_empresa": "Otra",
        "nombre_admin": "Otro",
        "correo_electronico": "ADMIN.acme@gmail.com",
        "password": PASSWORD,
    })

    assert r.status_code == 409


def test_registro_tenant_reservado(client):
    r = client.post(f"{API}/auth/register", json={
        "tenant_id": "super_admin",
        "nombre_empresa": "Intento",
        "nombre_admin": "Intento",
        "correo_electronico": "intento@gmail.com",
        "password": PASSWORD,
    })

    assert r.status_code == 409


def test_registro_dominio_no_permitido(client):
    r = client.post(f"{API}/auth/register", json={
        "tenant_id": "acme",
        "nombre_empresa": "Acme",
        "nombre_admin": "Admin",
        "correo_electronico": "admin@empresa.mx",
        "password": PASSWORD,
    })

    assert r.status_code == 400
    assert "dominio" in r.json()["message"]


def test_check_tenant(client):
    libre = client.get(f"{API}/auth/check-tenant/acme")
    register_tenant(client, "acme", "admin.acme@gmail.com")
    ocupado = client.get(f"{API}/auth/check-tenant/acme")

    assert libre.json() == {"exists": False, "message": "Tenant ID disponible."}
    assert ocupado.json()["exists"] is True


def test_login_devuelve_token_con_identidad(client, db):
    register_tenant(client, "acme", "admin.acme@gmail.com")

    r = client.post(f"{API}/auth/login", json={
        "tenant_id": "acme",
        "correo_electronico": "admin.acme@gmail.com",
        "password": PASSWORD,
    })

    assert r.status_code == 200
    body = r.json()
    assert body["token_type"] == "bearer"
    assert body["rol"] == "administrador"
    assert body["necesita_cambio_pw"] is False

    identity = decode_token(body["access_token"])
    empresa = db.query(Empresa).filter(Empresa.tenant_id == "acme").one()
    assert identity.empresa_id == empresa.id
    assert identity.tenant_id == "acme"
    assert identity.rol == "administrador"


@pytest.mark.parametrize("tenant_id,correo,password", [
    ("acme", "admin.acme@gmail.com", "incorrecta"),
    ("acme", "nadie@gmail.com", PASSWORD),
    ("otra", "admin.acme@gmail.com", PASSWORD),
])
def test_login_fallido_mensaje_generico(client, tenant_id, correo, password):
    register_tenant(client, "acme", "admin.acme@gmail.com")

    r = client.post(f"{API}/auth/login", json={
        "tenant_id": tenant_id,
        "correo_electronico": correo,
        "password": password,
    })

    assert r.status_code == 401
    assert r.json() == {"success": False, "message": "Credenciales inválidas o Tenant ID incorrecto."}


def test_cambio_pw_forzado(client):
    register_tenant(client, "acme", "admin.acme@gmail.com", forzar_cambio_pw=True)
    primer_login = client.post(f"{API}/auth/login", json={
        "tenant_id": "acme",
        "correo_electronico": "admin.acme@gmail.com",
        "password": PASSWORD,
    })
    assert primer_login.json()["necesita_cambio_pw"] is True

    cambio = client.post(f"{API}/auth/cambio-pw-forzado", json={
        "tenant_id": "acme",
        "correo_electronico": "admin.acme@gmail.com",
        "new_password": "nueva123",
    })
    repetido = client.post(f"{API}/auth/cambio-pw-forzado", json={
        "tenant_id": "acme",
        "correo_electronico": "admin.acme@gmail.com",
        "new_password": "otra456",
    })

    assert cambio.status_code == 200
    assert repetido.status_code == 404
    login(client, "acme", "admin.acme@gmail.com", "nueva123")


# ==================== GUARDIA ====================

def test_token_invalido(client):
    r = client.get(f"{API}/admin/productos", headers=auth_headers("no-es-un-jwt"))

    assert r.status_code == 401
    assert r.headers["WWW-Authenticate"] == "Bearer"


def test_token_expirado(client):
    identity = IdentityContext(user_id=1, empresa_id=1, tenant_id="acme", rol="administrador")
    token = create_access_token(identity, expires_delta=timedelta(minutes=-5))

    r = client.get(f"{API}/admin/productos", headers=auth_headers(token))

    assert r.status_code == 401


def test_sin_token(client):
    r = client.get(f"{API}/admin/productos")

    assert r.status_code == 401
    assert r.json()["message"] == "Acceso denegado. No se proporcionó Token."


def test_token_roundtrip():
    identity = IdentityContext(user_id=7, empresa_id=3, tenant_id="acme", rol="usuario")

    assert decode_token(create_access_token(identity)) == identity


def test_check_roles():
    identity = IdentityContext(user_id=1, empresa_id=1, tenant_id="acme", rol="usuario")

    assert check_roles(identity, [Rol.USUARIO, "administrador"]) is identity
    with pytest.raises(AuthorizationError):
        check_roles(identity, [Rol.ADMINISTRADOR])


def test_decode_token_con_firma_ajena():
    token = jwt.encode({"sub": "1", "rol": "administrador"}, "otra-clave", algorithm="HS256")

    with pytest.raises(AuthenticationError):
        decode_token(token)
