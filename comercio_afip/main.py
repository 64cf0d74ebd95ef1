import os
import logging
from typing import List
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from .config import settings
from .exceptions import InvalidInvoiceData, QRRenderingFailed, UnsupportedInvoiceType
from .factura_pdf import generar_pdf
from .models import (
    ContactoInfo,
    ContactoRequest,
    CuitInfo,
    FacturaPDFRequest,
    FacturaPDFResponse,
    InvoiceQRRequest,
    QRResponse,
    TipoComprobanteInfo,
)
from .qr_afip import construir_url_qr, decodificar_url_qr, renderizar_qr
from .qr_render import data_uri_a_bytes
from .tipos_comprobante import TIPOS_COMPROBANTE, resolver_tipo_comprobante
from .validaciones import (
    es_dni,
    formatear_cuit,
    generar_cuits_desde_dni,
    tipo_persona,
    validar_cuit,
    validar_email,
    validar_telefono,
)

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="API Comercio AFIP",
    version="1.0",
    description="Genera el QR fiscal de ARCA/AFIP y el PDF de los comprobantes",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


def _qr_o_error(data: InvoiceQRRequest) -> QRResponse:
    try:
        url = construir_url_qr(data)
        imagen = renderizar_qr(url) if url else ""
    except (UnsupportedInvoiceType, InvalidInvoiceData) as e:
        raise HTTPException(status_code=422, detail=str(e))
    except QRRenderingFailed as e:
        logger.error(f"Error generando QR del comprobante {data.numero_comprobante}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    if not imagen:
        return QRResponse(autorizado=False)
    return QRResponse(
        autorizado=True,
        url=url,
        imagen=imagen,
        payload=decodificar_url_qr(url),
    )


@app.get("/", summary="Estado del servicio")
def root():
    return {"mensaje": "API AFIP funcionando correctamente"}


@app.get("/health", summary="Estado de salud del servicio")
def health_check():
    """Endpoint para verificar que la API está viva."""
    return {"status": "ok", "environment": settings.ambiente}


@app.post("/qr", response_model=QRResponse, summary="Genera el QR fiscal de un comprobante")
def generar_qr(data: InvoiceQRRequest):
    return _qr_o_error(data)


@app.get(
    "/tipos-comprobante",
    response_model=List[TipoComprobanteInfo],
    summary="Tipos de comprobante y su código ARCA",
)
def listar_tipos_comprobante():
    return [
        TipoComprobanteInfo(
            codigo=codigo,
            descripcion=descripcion,
            codigo_arca=resolver_tipo_comprobante(codigo),
        )
        for codigo, descripcion in TIPOS_COMPROBANTE.items()
    ]


@app.get("/cuit/{valor}", response_model=CuitInfo, summary="Valida un CUIT o sugiere CUITs desde un DNI")
def consultar_cuit(valor: str):
    dni = es_dni(valor)
    return CuitInfo(
        valido=validar_cuit(valor),
        cuit=formatear_cuit(valor),
        es_dni=dni,
        tipo_persona=tipo_persona(valor),
        candidatos=[formatear_cuit(c) for c in generar_cuits_desde_dni(valor)] if dni else [],
    )


@app.post("/contacto/validar", response_model=ContactoInfo, summary="Valida el email y el teléfono de un cliente o proveedor")
def validar_contacto(data: ContactoRequest):
    return ContactoInfo(
        email_valido=validar_email(data.email) if data.email else None,
        telefono_valido=validar_telefono(data.telefono) if data.telefono else None,
    )


@app.post(
    "/comprobante/pdf",
    response_model=FacturaPDFResponse,
    summary="Genera el PDF del comprobante con el QR fiscal",
)
def emitir_pdf(data: FacturaPDFRequest):
    qr = _qr_o_error(data)
    qr_png = data_uri_a_bytes(qr.imagen) if qr.imagen else None
    try:
        pdf_path = generar_pdf(data, qr_png)
    except InvalidInvoiceData as e:
        raise HTTPException(status_code=422, detail=str(e))
    except OSError as e:
        logger.error(f"No se pudo escribir el PDF del comprobante {data.numero_comprobante}: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    return FacturaPDFResponse(pdf=pdf_path)


@app.get(
    "/comprobante/{cuit}/{pto}/{nro}",
    summary="Descarga el PDF de un comprobante existente"
)
def descargar_pdf(cuit: int, pto: int, nro: int):
    """
    Sirve desde disco:
      comprobantes/{cuit}/factura_{pto:04d}_{nro}.pdf
    """
    base_dir = os.path.abspath(settings.COMPROBANTES_DIR)

    filename = f"factura_{pto:04d}_{nro}.pdf"
    user_path = os.path.abspath(os.path.join(base_dir, str(cuit), filename))

    # El path resuelto debe quedar dentro del directorio base
    if not user_path.startswith(base_dir + os.sep):
        raise HTTPException(status_code=400, detail="Ruta de archivo inválida.")

    if not os.path.isfile(user_path):
        raise HTTPException(status_code=404, detail="PDF no encontrado")
    return FileResponse(user_path, media_type="application/pdf", filename=filename)
