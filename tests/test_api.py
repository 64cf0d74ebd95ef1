import os

import pytest
from fastapi.testclient import TestClient

from comercio_afip.config import settings
from comercio_afip.main import app

client = TestClient(app)

FACTURA = {
    "fecha": "2024-03-15",
    "cuit": "20-12345678-9",
    "punto_venta": 1,
    "tipo_comprobante": "factura_b",
    "numero_comprobante": "0001-00000042",
    "importe": 1500.50,
    "cae": "71234567890123",
}


@pytest.fixture
def comprobantes_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "COMPROBANTES_DIR", str(tmp_path))
    return tmp_path


def test_root_y_health():
    assert client.get("/").status_code == 200
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["environment"] in ("homologacion", "produccion")


def test_qr_autorizado():
    response = client.post("/qr", json=FACTURA)

    assert response.status_code == 200
    body = response.json()
    assert body["autorizado"] is True
    assert body["imagen"].startswith("data:image/png;base64,")
    assert "/fe/qr/?p=" in body["url"]
    assert body["payload"]["tipoCmp"] == 6
    assert body["payload"]["nroCmp"] == 42
    assert body["payload"]["codAut"] == 71234567890123
    assert body["payload"]["fecha"] == "2024-03-15"


def test_qr_sin_cae():
    response = client.post("/qr", json={**FACTURA, "cae": None})

    assert response.status_code == 200
    assert response.json() == {"autorizado": False, "url": None, "imagen": None, "payload": None}


def test_qr_tipo_no_soportado():
    response = client.post("/qr", json={**FACTURA, "tipo_comprobante": "factura_x"})
    assert response.status_code == 422
    assert "factura_x" in response.json()["detail"]


def test_qr_datos_invalidos():
    assert client.post("/qr", json={**FACTURA, "punto_venta": 0}).status_code == 422
    assert client.post("/qr", json={**FACTURA, "importe": -1}).status_code == 422
    assert client.post("/qr", json={**FACTURA, "cae": "pendiente"}).status_code == 422


def test_qr_error_de_renderizado(monkeypatch):
    # Una URL de más de 4000 caracteres no entra en un QR con corrección M
    monkeypatch.setattr(settings, "AFIP_QR_HOST", "x" * 4000)
    response = client.post("/qr", json=FACTURA)
    assert response.status_code == 500
    assert "corrección M" in response.json()["detail"]


def test_tipos_comprobante():
    response = client.get("/tipos-comprobante")
    assert response.status_code == 200
    tipos = {t["codigo"]: t for t in response.json()}
    assert tipos["factura_a"]["codigo_arca"] == 1
    assert tipos["recibo_c"]["codigo_arca"] == 15
    assert tipos["ticket_fiscal"]["codigo_arca"] is None
    assert tipos["nota_credito_b"]["descripcion"] == "Nota de Crédito B"


def test_cuit_valido():
    body = client.get("/cuit/20123456786").json()
    assert body == {
        "valido": True,
        "cuit": "20-12345678-6",
        "es_dni": False,
        "tipo_persona": "fisica",
        "candidatos": [],
    }


def test_cuit_desde_dni():
    body = client.get("/cuit/12345678").json()
    assert body["valido"] is False
    assert body["es_dni"] is True
    assert len(body["candidatos"]) == 4
    assert body["candidatos"][0].startswith("20-12345678-")


def test_pdf_y_descarga(comprobantes_dir):
    response = client.post(
        "/comprobante/pdf",
        json={**FACTURA, "razon_social": "Comercio SRL", "cae_vencimiento": "2024-03-25"},
    )
    assert response.status_code == 200
    pdf_path = response.json()["pdf"]
    assert pdf_path == os.path.join(str(comprobantes_dir), "20123456789", "factura_0001_42.pdf")
    with open(pdf_path, "rb") as f:
        assert f.read(5) == b"%PDF-"

    descarga = client.get("/comprobante/20123456789/1/42")
    assert descarga.status_code == 200
    assert descarga.headers["content-type"] == "application/pdf"
    assert descarga.content.startswith(b"%PDF-")


def test_pdf_sin_cae(comprobantes_dir):
    response = client.post(
        "/comprobante/pdf",
        json={**FACTURA, "cae": None, "razon_social": "Comercio SRL"},
    )
    assert response.status_code == 200
    assert os.path.isfile(response.json()["pdf"])


def test_descarga_inexistente(comprobantes_dir):
    assert client.get("/comprobante/20123456789/1/999").status_code == 404


def test_cuit_persona_juridica():
    body = client.get("/cuit/30-71234567-1").json()
    assert body["valido"] is True
    assert body["tipo_persona"] == "juridica"


def test_qr_importe_infinito():
    assert client.post("/qr", json={**FACTURA, "importe": "inf"}).status_code == 422
    assert client.post("/qr", json={**FACTURA, "importe": "nan"}).status_code == 422


def test_qr_construye_la_url_una_sola_vez(monkeypatch):
    import comercio_afip.main as main_mod

    llamadas = []
    original = main_mod.construir_url_qr

    def contar(data):
        llamadas.append(data.numero_comprobante)
        return original(data)

    monkeypatch.setattr(main_mod, "construir_url_qr", contar)
    response = client.post("/qr", json=FACTURA)
    assert response.status_code == 200
    assert llamadas == ["0001-00000042"]


def test_pdf_cuit_con_ruta_relativa_no_sale_del_directorio(comprobantes_dir):
    response = client.post(
        "/comprobante/pdf",
        json={**FACTURA, "cuit": "../../x", "cae": None, "razon_social": "Comercio SRL"},
    )
    assert response.status_code == 422
    assert not (comprobantes_dir.parent.parent / "x").exists()
    assert list(comprobantes_dir.iterdir()) == []


def test_pdf_cuit_absoluto_rechazado(comprobantes_dir, tmp_path_factory):
    afuera = tmp_path_factory.mktemp("afuera")
    response = client.post(
        "/comprobante/pdf",
        json={**FACTURA, "cuit": str(afuera), "cae": None, "razon_social": "Comercio SRL"},
    )
    assert response.status_code == 422
    assert list(afuera.iterdir()) == []


def test_contacto_validar():
    body = client.post(
        "/contacto/validar", json={"email": "ventas@comercio.com.ar", "telefono": "abc"}
    ).json()
    assert body == {"email_valido": True, "telefono_valido": False}

    body = client.post("/contacto/validar", json={}).json()
    assert body == {"email_valido": None, "telefono_valido": None}
