"""
Generador del QR fiscal de ARCA (ex AFIP) para comprobantes electrónicos.

Según la especificación publicada por ARCA:
1. Armar el JSON con los datos del comprobante (ver, fecha, cuit, ptoVta,
   tipoCmp, nroCmp, importe, moneda, ctz, tipoCodAut, codAut)
2. Codificarlo en base64
3. Construir la URL https://<host>/fe/qr/?p=<base64>
4. Generar la imagen QR de esa URL

Un comprobante sin CAE todavía no tiene QR: se devuelve string vacío.
"""
import base64
import binascii
import json
import logging
from datetime import date, datetime, timezone
from typing import Optional, Union
from urllib.parse import parse_qs, urlsplit

from .config import settings
from .exceptions import InvalidInvoiceData, QRRenderingFailed, UnsupportedInvoiceType
from .models import InvoiceQRRequest, OpcionesQR, PayloadQRAfip
from .qr_render import QRCodeEncoder, QREncoder
from .tipos_comprobante import resolver_tipo_comprobante

logger = logging.getLogger(__name__)

OPCIONES_QR_AFIP = OpcionesQR(error_correction="M", width=200, margin=1)


def normalizar_fecha(
    fecha: Union[datetime, date, str],
    zona_horaria: Optional[timezone] = None,
) -> str:
    """
    Devuelve la fecha de emisión en formato YYYY-MM-DD.

    ARCA espera la fecha calendario local: una fecha-hora con zona se pasa
    primero a la zona horaria de reporte (UTC-3 por defecto). Fechas sin
    zona se toman como locales.
    """
    if isinstance(fecha, datetime):
        dt = fecha
    elif isinstance(fecha, date):
        return fecha.isoformat()
    else:
        texto = str(fecha).strip()
        if texto.endswith(("Z", "z")):
            texto = texto[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(texto)
        except ValueError as e:
            raise InvalidInvoiceData(f"Fecha de emisión inválida: {fecha!r}") from e

    if dt.tzinfo is not None:
        dt = dt.astimezone(zona_horaria or settings.zona_horaria)
    return dt.date().isoformat()


def extraer_numero_comprobante(numero_comprobante: str) -> int:
    """
    Extrae el número de comprobante del formato PPPP-NNNNNNNN.
    Si falta la segunda parte se usa 1.
    """
    partes = numero_comprobante.split("-")
    numero = partes[1].strip() if len(partes) > 1 else ""
    if not numero:
        return 1
    if not (numero.isascii() and numero.isdigit()):
        raise InvalidInvoiceData(
            f"Número de comprobante inválido: {numero_comprobante!r}"
        )
    return int(numero)


def _a_entero(valor: str, campo: str) -> int:
    limpio = valor.strip()
    if not (limpio.isascii() and limpio.isdigit()):
        raise InvalidInvoiceData(f"{campo} inválido: {valor!r}")
    return int(limpio)


def construir_payload(datos: InvoiceQRRequest) -> PayloadQRAfip:
    """
    Arma los datos del QR. Requiere CAE y un tipo de comprobante conocido.
    """
    if not datos.cae:
        raise InvalidInvoiceData("El comprobante no tiene CAE")

    tipo_cmp = resolver_tipo_comprobante(datos.tipo_comprobante)
    if tipo_cmp is None:
        raise UnsupportedInvoiceType(datos.tipo_comprobante)

    doc_receptor = {}
    if datos.tipo_doc_rec is not None and datos.nro_doc_rec is not None:
        doc_receptor = {
            "tipoDocRec": datos.tipo_doc_rec,
            "nroDocRec": datos.nro_doc_rec,
        }

    return PayloadQRAfip(
        fecha=normalizar_fecha(datos.fecha),
        cuit=_a_entero(datos.cuit.replace("-", ""), "CUIT"),
        ptoVta=datos.punto_venta,
        tipoCmp=tipo_cmp,
        nroCmp=extraer_numero_comprobante(datos.numero_comprobante),
        importe=round(float(datos.importe), 2),
        codAut=_a_entero(datos.cae, "CAE"),
        **doc_receptor,
    )


def serializar_payload(payload: PayloadQRAfip) -> str:
    try:
        return json.dumps(
            payload.model_dump(exclude_none=True),
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        )
    except ValueError as e:
        # inf/nan no son JSON válido para el lector de ARCA
        raise InvalidInvoiceData(f"Importe inválido: {payload.importe}") from e


def construir_url_qr(datos: InvoiceQRRequest, host: Optional[str] = None) -> str:
    """
    Devuelve la URL que va dentro del QR, o "" si el comprobante no tiene CAE.
    """
    if not datos.cae:
        return ""

    payload = construir_payload(datos)
    p = base64.b64encode(serializar_payload(payload).encode("utf-8")).decode("ascii")
    return f"https://{host or settings.AFIP_QR_HOST}/fe/qr/?p={p}"


def decodificar_url_qr(url: str) -> dict:
    """Inversa de construir_url_qr: devuelve el JSON embebido en la URL."""
    valores = parse_qs(urlsplit(url).query).get("p")
    if not valores:
        raise InvalidInvoiceData("La URL no tiene el parámetro p")
    # parse_qs convierte '+' en espacio
    p = valores[0].replace(" ", "+")
    try:
        return json.loads(base64.b64decode(p, validate=True).decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        raise InvalidInvoiceData(f"Parámetro p inválido: {e}") from e


def renderizar_qr(
    url: str,
    encoder: Optional[QREncoder] = None,
    opciones: OpcionesQR = OPCIONES_QR_AFIP,
) -> str:
    """Pasa una URL ya construida al encoder (data URI PNG)."""
    encoder = encoder or QRCodeEncoder()
    try:
        return encoder.encode(url, opciones)
    except QRRenderingFailed:
        raise
    except Exception as e:
        raise QRRenderingFailed(f"Error generando QR: {e}") from e


def generar_qr_afip(
    datos: InvoiceQRRequest,
    encoder: Optional[QREncoder] = None,
    host: Optional[str] = None,
    opciones: OpcionesQR = OPCIONES_QR_AFIP,
) -> str:
    """
    Genera la imagen del QR fiscal (data URI PNG).

    - Sin CAE devuelve "" y no llama al encoder.
    - Tipo de comprobante desconocido: UnsupportedInvoiceType.
    - Si el encoder falla: QRRenderingFailed.
    """
    if not datos.cae:
        logger.debug(
            "Comprobante %s sin CAE: no se genera QR", datos.numero_comprobante
        )
        return ""

    url = construir_url_qr(datos, host=host)
    logger.debug("URL QR para %s: %s", datos.numero_comprobante, url)
    return renderizar_qr(url, encoder=encoder, opciones=opciones)
