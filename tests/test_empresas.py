"""Administración global (super_admin) y usuarios de cada empresa"""
from conftest import API, PASSWORD, auth_headers, crear_producto, login, register_tenant, vender

from app.shared.database.models import Empresa, Producto, Usuario, Venta
from scripts.bootstrap_super_admin import bootstrap_super_admin


def test_bootstrap_es_idempotente(db):
    assert bootstrap_super_admin(db, "central@gmail.com", PASSWORD) is True
    assert bootstrap_super_admin(db, "central@gmail.com", "otra") is False

    usuario = db.query(Usuario).filter(Usuario.correo_electronico == "central@gmail.com").one()
    assert usuario.empresa_id is None
    assert usuario.rol == "super_admin"


def test_super_admin_lista_empresas(client, admin_headers, otra_headers, super_admin_headers):
    r = client.get(f"{API}/superadmin/empresas", headers=super_admin_headers)

    assert r.status_code == 200
    body = r.json()
    assert body["total"] == 2
    correos = {e["tenant_id"]: e["admin_email"] for e in body["empresas"]}
    assert correos == {"acme": "admin.acme@gmail.com", "globex": "admin.globex@outlook.com"}


def test_listado_de_empresas_solo_para_super_admin(client, admin_headers):
    r = client.get(f"{API}/superadmin/empresas", headers=admin_headers)

    assert r.status_code == 403


def test_eliminar_empresa_en_cascada(client, admin_headers, otra_headers, super_admin_headers, db):
    producto = crear_producto(client, admin_headers, precio=10.0)
    vender(client, admin_headers, producto["id"], 1, 10.0)
    crear_producto(client, otra_headers, clave="G-1")

    r = client.delete(f"{API}/superadmin/empresas/acme", headers=super_admin_headers)

    assert r.status_code == 200, r.text
    assert "acme" in r.json()["message"]
    assert db.query(Empresa).filter(Empresa.tenant_id == "acme").count() == 0
    assert db.query(Venta).count() == 0
    assert [p.clave for p in db.query(Producto)] == ["G-1"]


def test_eliminar_empresa_inexistente(client, super_admin_headers):
    r = client.delete(f"{API}/superadmin/empresas/fantasma", headers=super_admin_headers)

    assert r.status_code == 404


def test_super_admin_no_se_elimina(client, super_admin_headers):
    r = client.delete(f"{API}/superadmin/empresas/super_admin", headers=super_admin_headers)

    assert r.status_code == 403


def test_reset_pw_fuerza_cambio(client, admin_headers, super_admin_headers):
    r = client.post(f"{API}/superadmin/reset-pw", json={
        "tenant_id": "acme",
        "correo_electronico": "admin.acme@gmail.com",
        "new_password": "temporal1",
    }, headers=super_admin_headers)

    assert r.status_code == 200
    relogin = client.post(f"{API}/auth/login", json={
        "tenant_id": "acme",
        "correo_electronico": "admin.acme@gmail.com",
        "password": "temporal1",
    })
    assert relogin.json()["necesita_cambio_pw"] is True


def test_reset_pw_administrador_inexistente(client, admin_headers, super_admin_headers):
    r = client.post(f"{API}/superadmin/reset-pw", json={
        "tenant_id": "acme",
        "correo_electronico": "nadie@gmail.com",
        "new_password": "temporal1",
    }, headers=super_admin_headers)

    assert r.status_code == 404


def test_super_admin_no_vende(client, super_admin_headers):
    r = client.post(f"{API}/admin/ventas", json={
        "detalles": [{"producto_id": 1, "cantidad": 1}],
        "pagos": [{"metodo": "efectivo", "monto": 10.0}],
    }, headers=super_admin_headers)

    assert r.status_code == 400


# ==================== USUARIOS DE LA EMPRESA ====================

def test_crear_y_listar_usuarios(client, admin_headers, otra_headers):
    r = client.post(f"{API}/admin/usuarios", json={
        "nombre": "Cajero",
        "correo_electronico": "Cajero@Gmail.com",
        "password": "cajero123",
        "rol": "usuario",
    }, headers=admin_headers)

    assert r.status_code == 201, r.text
    usuario = r.json()["usuario"]
    assert usuario["correo_electronico"] == "cajero@gmail.com"
    assert usuario["necesita_cambio_pw"] is True

    propios = client.get(f"{API}/admin/usuarios", headers=admin_headers).json()["usuarios"]
    ajenos = client.get(f"{API}/admin/usuarios", headers=otra_headers).json()["usuarios"]
    assert {u["correo_electronico"] for u in propios} == {"admin.acme@gmail.com", "cajero@gmail.com"}
    assert "cajero@gmail.com" not in {u["correo_electronico"] for u in ajenos}


def test_usuario_con_correo_existente(client, admin_headers):
    r = client.post(f"{API}/admin/usuarios", json={
        "nombre": "Repetido",
        "correo_electronico": "admin.acme@gmail.com",
        "password": "cajero123",
    }, headers=admin_headers)

    assert r.status_code == 409


def test_rol_no_asignable(client, admin_headers):
    r = client.post(f"{API}/admin/usuarios", json={
        "nombre": "Intruso",
        "correo_electronico": "intruso@gmail.com",
        "password": "intruso123",
        "rol": "super_admin",
    }, headers=admin_headers)

    assert r.status_code == 400


def test_nuevo_usuario_inicia_sesion(client, admin_headers):
    client.post(f"{API}/admin/usuarios", json={
        "nombre": "Supervisor",
        "correo_electronico": "supervisor@yahoo.com",
        "password": "super123",
        "rol": "administrador",
    }, headers=admin_headers)

    headers = auth_headers(login(client, "acme", "supervisor@yahoo.com", "super123"))

    assert client.get(f"{API}/admin/categorias", headers=headers).status_code == 200


def test_empresa_registrada_despues_no_ve_datos_previos(client, admin_headers):
    crear_producto(client, admin_headers)
    register_tenant(client, "nueva", "nueva@icloud.com")
    headers = auth_headers(login(client, "nueva", "nueva@icloud.com"))

    assert client.get(f"{API}/admin/productos", headers=headers).json()["productos"] == []
