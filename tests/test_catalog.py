"""Catálogos por empresa: unicidad, aislamiento y registros protegidos"""
import pytest

from conftest import API, auth_headers, crear_producto, login, vender


@pytest.mark.parametrize("recurso,singular", [
    ("categorias", "categoria"),
    ("clasificaciones", "clasificacion"),
    ("proveedores", "proveedor"),
    ("clientes", "cliente"),
    ("vendedores", "vendedor"),
])
def test_crud_catalogo(client, admin_headers, recurso, singular):
    creado = client.post(f"{API}/admin/{recurso}", json={"nombre": "Mayoreo"}, headers=admin_headers)
    assert creado.status_code == 201, creado.text
    entidad = creado.json()[singular]
    assert entidad["nombre"] == "Mayoreo"

    listado = client.get(f"{API}/admin/{recurso}", headers=admin_headers)
    assert listado.status_code == 200
    assert "Mayoreo" in [e["nombre"] for e in listado.json()[recurso]]

    editado = client.put(f"{API}/admin/{recurso}/{entidad['id']}", json={"nombre": "Menudeo"}, headers=admin_headers)
    assert editado.status_code == 200, editado.text
    assert editado.json()[singular]["nombre"] == "Menudeo"

    borrado = client.delete(f"{API}/admin/{recurso}/{entidad['id']}", headers=admin_headers)
    assert borrado.status_code == 200
    assert borrado.json()["success"] is True

    listado = client.get(f"{API}/admin/{recurso}", headers=admin_headers)
    assert "Menudeo" not in [e["nombre"] for e in listado.json()[recurso]]


def test_nombre_duplicado_sin_distinguir_mayusculas(client, admin_headers):
    client.post(f"{API}/admin/categorias", json={"nombre": "Bebidas"}, headers=admin_headers)

    r = client.post(f"{API}/admin/categorias", json={"nombre": "BEBIDAS"}, headers=admin_headers)

    assert r.status_code == 409
    assert '"BEBIDAS"' in r.json()["message"]


def test_renombrar_a_nombre_existente(client, admin_headers):
    client.post(f"{API}/admin/proveedores", json={"nombre": "Norte"}, headers=admin_headers)
    sur = client.post(f"{API}/admin/proveedores", json={"nombre": "Sur"}, headers=admin_headers).json()["proveedor"]

    r = client.put(f"{API}/admin/proveedores/{sur['id']}", json={"nombre": "norte"}, headers=admin_headers)

    assert r.status_code == 409

    # Conservar el propio nombre no es conflicto
    r = client.put(f"{API}/admin/proveedores/{sur['id']}", json={"nombre": "SUR"}, headers=admin_headers)
    assert r.status_code == 200


def test_mismo_nombre_en_otra_empresa(client, admin_headers, otra_headers):
    a = client.post(f"{API}/admin/categorias", json={"nombre": "Bebidas"}, headers=admin_headers)
    b = client.post(f"{API}/admin/categorias", json={"nombre": "Bebidas"}, headers=otra_headers)

    assert a.status_code == 201
    assert b.status_code == 201


def test_id_de_otra_empresa_es_no_encontrado(client, admin_headers, otra_headers):
    ajena = client.post(f"{API}/admin/categorias", json={"nombre": "Ajena"}, headers=otra_headers).json()["categoria"]

    editar = client.put(f"{API}/admin/categorias/{ajena['id']}", json={"nombre": "Mia"}, headers=admin_headers)
    borrar = client.delete(f"{API}/admin/categorias/{ajena['id']}", headers=admin_headers)
    inexistente = client.delete(f"{API}/admin/categorias/9999", headers=admin_headers)

    assert editar.status_code == 404
    assert borrar.status_code == 404
    assert inexistente.status_code == 404
    assert editar.json()["message"] == borrar.json()["message"] == inexistente.json()["message"]

    propias = client.get(f"{API}/admin/categorias", headers=admin_headers).json()["categorias"]
    assert propias == []


def test_registros_por_defecto_protegidos(client, admin_headers):
    clientes = client.get(f"{API}/admin/clientes", headers=admin_headers).json()["clientes"]
    vendedores = client.get(f"{API}/admin/vendedores", headers=admin_headers).json()["vendedores"]
    publico = next(c for c in clientes if c["nombre"] == "público general")
    administrador = next(v for v in vendedores if v["nombre"] == "administrador")

    assert client.put(
        f"{API}/admin/clientes/{publico['id']}", json={"nombre": "Otro"}, headers=admin_headers
    ).status_code == 403
    assert client.delete(f"{API}/admin/clientes/{publico['id']}", headers=admin_headers).status_code == 403
    assert client.put(
        f"{API}/admin/vendedores/{administrador['id']}", json={"nombre": "Otro"}, headers=admin_headers
    ).status_code == 403
    assert client.delete(f"{API}/admin/vendedores/{administrador['id']}", headers=admin_headers).status_code == 403


def test_nombre_vacio(client, admin_headers):
    r = client.post(f"{API}/admin/clientes", json={"nombre": "   "}, headers=admin_headers)

    assert r.status_code == 400
    assert r.json()["success"] is False


def test_clasificacion_en_uso_no_se_elimina(client, admin_headers):
    producto = crear_producto(client, admin_headers)

    r = client.delete(f"{API}/admin/clasificaciones/{producto['clasificacion_id']}", headers=admin_headers)

    assert r.status_code == 409


# ==================== PRODUCTOS ====================

def test_producto_incluye_nombres_relacionados(client, admin_headers):
    producto = crear_producto(client, admin_headers, clave="SKU-1", precio=15.5, costo=9.25)

    assert producto["clasificacion_nombre"] == "Clas SKU-1"
    assert producto["proveedor_nombre"] == "Prov SKU-1"
    assert producto["categoria_nombre"] is None
    assert producto["precio"] == 15.5
    assert producto["costo"] == 9.25


def test_clave_duplicada(client, admin_headers):
    producto = crear_producto(client, admin_headers, clave="SKU-1")

    r = client.post(f"{API}/admin/productos", json={
        "clave": "sku-1",
        "descripcion": "Otro",
        "stock": 1,
        "costo": 1,
        "precio": 2,
        "clasificacion_id": producto["clasificacion_id"],
        "proveedor_id": producto["proveedor_id"],
    }, headers=admin_headers)

    assert r.status_code == 409


@pytest.mark.parametrize("campo,valor", [("stock", -1), ("precio", -5), ("costo", "abc")])
def test_producto_valores_invalidos(client, admin_headers, campo, valor):
    base = crear_producto(client, admin_headers, clave="BASE")
    payload = {
        "clave": "NUEVO",
        "descripcion": "Nuevo",
        "stock": 1,
        "costo": 1,
        "precio": 2,
        "clasificacion_id": base["clasificacion_id"],
        "proveedor_id": base["proveedor_id"],
    }
    payload[campo] = valor

    r = client.post(f"{API}/admin/productos", json=payload, headers=admin_headers)

    assert r.status_code == 400


def test_producto_con_referencia_de_otra_empresa(client, admin_headers, otra_headers):
    propio = crear_producto(client, admin_headers, clave="PROPIO")
    clas_ajena = client.post(
        f"{API}/admin/clasificaciones", json={"nombre": "Ajena"}, headers=otra_headers
    ).json()["clasificacion"]

    r = client.post(f"{API}/admin/productos", json={
        "clave": "NUEVO",
        "descripcion": "Nuevo",
        "stock": 1,
        "costo": 1,
        "precio": 2,
        "clasificacion_id": clas_ajena["id"],
        "proveedor_id": propio["proveedor_id"],
    }, headers=admin_headers)

    assert r.status_code == 400
    assert "inválida" in r.json()["message"]


def test_actualizar_producto(client, admin_headers):
    producto = crear_producto(client, admin_headers, clave="SKU-1", stock=5, precio=10.0)

    r = client.put(f"{API}/admin/productos/{producto['id']}", json={
        "clave": "SKU-1",
        "descripcion": "Renombrado",
        "stock": 7,
        "costo": 4,
        "precio": 11,
        "clasificacion_id": producto["clasificacion_id"],
        "proveedor_id": producto["proveedor_id"],
    }, headers=admin_headers)

    assert r.status_code == 200, r.text
    assert r.json()["producto"]["descripcion"] == "Renombrado"
    assert r.json()["producto"]["stock"] == 7


def test_producto_vendido_no_se_elimina(client, admin_headers):
    producto = crear_producto(client, admin_headers, precio=10.0)
    vender(client, admin_headers, producto["id"], 1, 10.0)

    r = client.delete(f"{API}/admin/productos/{producto['id']}", headers=admin_headers)

    assert r.status_code == 409


def test_usuario_lista_productos_pero_no_crea(client, admin_headers):
    crear_producto(client, admin_headers, clave="SKU-1")
    client.post(f"{API}/admin/usuarios", json={
        "nombre": "Cajero",
        "correo_electronico": "cajero@gmail.com",
        "password": "cajero123",
        "rol": "usuario",
    }, headers=admin_headers)
    cajero = auth_headers(login(client, "acme", "cajero@gmail.com", "cajero123"))

    listado = client.get(f"{API}/admin/productos", headers=cajero)
    alta = client.post(f"{API}/admin/categorias", json={"nombre": "X"}, headers=cajero)
    categorias = client.get(f"{API}/admin/categorias", headers=cajero)

    assert listado.status_code == 200
    assert [p["clave"] for p in listado.json()["productos"]] == ["SKU-1"]
    assert alta.status_code == 403
    assert categorias.status_code == 403


def test_super_admin_lista_global_pero_no_modifica(client, admin_headers, otra_headers, super_admin_headers):
    client.post(f"{API}/admin/categorias", json={"nombre": "De Acme"}, headers=admin_headers)
    client.post(f"{API}/admin/categorias", json={"nombre": "De Globex"}, headers=otra_headers)

    listado = client.get(f"{API}/admin/categorias", headers=super_admin_headers)
    alta = client.post(f"{API}/admin/categorias", json={"nombre": "Central"}, headers=super_admin_headers)

    assert listado.status_code == 200
    assert {"De Acme", "De Globex"} <= {c["nombre"] for c in listado.json()["categorias"]}
    assert alta.status_code == 403
