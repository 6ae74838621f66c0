"""Fixtures compartidas: base SQLite por test, cliente HTTP y empresas de prueba"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "clave-de-pruebas-no-usar-en-produccion")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from app.config.database import Base, build_engine, get_db  # noqa: E402
from app.core.auth.security import decode_token  # noqa: E402
from app.main import app  # noqa: E402
from scripts.bootstrap_super_admin import bootstrap_super_admin  # noqa: E402

API = "/api/v1"
PASSWORD = "secreto123"


@pytest.fixture
def engine(tmp_path):
    """Base en archivo para que varias conexiones (hilos) compartan los datos"""
    engine = build_engine(f"sqlite:///{tmp_path / 'inventario.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


# -------- Utilidades --------

def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register_tenant(client, tenant_id: str, correo: str, forzar_cambio_pw: bool = False):
    r = client.post(f"{API}/auth/register", json={
        "tenant_id": tenant_id,
        "nombre_empresa": f"Empresa {tenant_id}",
        "nombre_admin": f"Admin {tenant_id}",
        "correo_electronico": correo,
        "password": PASSWORD,
        "forzar_cambio_pw": forzar_cambio_pw,
    })
    assert r.status_code == 201, r.text
    return r


def login(client, tenant_id: str, correo: str, password: str = PASSWORD) -> str:
    r = client.post(f"{API}/auth/login", json={
        "tenant_id": tenant_id,
        "correo_electronico": correo,
        "password": password,
    })
    assert r.status_code == 200, r.text
    return r.json()["access_token"]


def crear_producto(client, headers, clave="P-001", stock=10, precio=10.0, costo=6.0, descripcion=None):
    """Alta de producto con su propia clasificación y proveedor"""
    clas = client.post(f"{API}/admin/clasificaciones", json={"nombre": f"Clas {clave}"}, headers=headers)
    assert clas.status_code == 201, clas.text
    prov = client.post(f"{API}/admin/proveedores", json={"nombre": f"Prov {clave}"}, headers=headers)
    assert prov.status_code == 201, prov.text

    r = client.post(f"{API}/admin/productos", json={
        "clave": clave,
        "descripcion": descripcion or f"Producto {clave}",
        "stock": stock,
        "costo": costo,
        "precio": precio,
        "clasificacion_id": clas.json()["clasificacion"]["id"],
        "proveedor_id": prov.json()["proveedor"]["id"],
    }, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()["producto"]


def get_producto(client, headers, producto_id: int) -> dict:
    r = client.get(f"{API}/admin/productos", headers=headers)
    assert r.status_code == 200, r.text
    return next(p for p in r.json()["productos"] if p["id"] == producto_id)


def vender(client, headers, producto_id: int, cantidad: int, monto: float, **extra):
    payload = {
        "detalles": [{"producto_id": producto_id, "cantidad": cantidad}],
        "pagos": [{"metodo": "efectivo", "monto": monto}],
    }
    payload.update(extra)
    return client.post(f"{API}/admin/ventas", json=payload, headers=headers)


# -------- Empresas de prueba --------

@pytest.fixture
def admin_token(client):
    register_tenant(client, "acme", "admin.acme@gmail.com")
    return login(client, "acme", "admin.acme@gmail.com")


@pytest.fixture
def admin_headers(admin_token):
    return auth_headers(admin_token)


@pytest.fixture
def admin_identity(admin_token):
    return decode_token(admin_token)


@pytest.fixture
def otra_headers(client):
    register_tenant(client, "globex", "admin.globex@outlook.com")
    return auth_headers(login(client, "globex", "admin.globex@outlook.com"))


@pytest.fixture
def super_admin_headers(client, db):
    bootstrap_super_admin(db, "central@gmail.com", PASSWORD)
    return auth_headers(login(client, "super_admin", "central@gmail.com"))
