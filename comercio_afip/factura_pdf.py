import os
import re
from io import BytesIO
from typing import Optional

from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from .config import settings
from .exceptions import InvalidInvoiceData
from .qr_afip import extraer_numero_comprobante, normalizar_fecha
from .models import FacturaPDFRequest
from .tipos_comprobante import etiqueta_comprobante
from .validaciones import formatear_cuit


def _importe(valor: float) -> str:
    # 1500.5 -> "1500,50"
    return f"{valor:.2f}".replace(".", ",")


def ruta_pdf(cuit: str, punto_venta: int, nro_cbte: int) -> str:
    # El CUIT forma parte de la ruta: solo se aceptan sus 11 dígitos
    cuit_limpio = cuit.replace("-", "").strip()
    if not re.fullmatch(r"[0-9]{11}", cuit_limpio):
        raise InvalidInvoiceData(f"CUIT inválido: {cuit!r}")

    pdf_path = os.path.join(
        settings.COMPROBANTES_DIR,
        cuit_limpio,
        f"factura_{punto_venta:04d}_{nro_cbte}.pdf",
    )

    # El path resuelto debe quedar dentro del directorio base
    base_dir = os.path.abspath(settings.COMPROBANTES_DIR)
    if not os.path.abspath(pdf_path).startswith(base_dir + os.sep):
        raise InvalidInvoiceData(f"Ruta de PDF inválida: {pdf_path}")
    return pdf_path


def generar_pdf(data: FacturaPDFRequest, qr_png: Optional[bytes] = None) -> str:
    """
    Genera un PDF con los datos de la factura y el QR, lo guarda
    en comprobantes/{cuit}/factura_{pto}_{nro}.pdf
    y devuelve la ruta al archivo.
    """
    nro_cbte = extraer_numero_comprobante(data.numero_comprobante)
    pdf_path = ruta_pdf(data.cuit, data.punto_venta, nro_cbte)
    os.makedirs(os.path.dirname(pdf_path), exist_ok=True)

    fecha = normalizar_fecha(data.fecha)
    anio, mes, dia = fecha.split("-")

    c = canvas.Canvas(pdf_path, pagesize=A4)
    c.setFont("Helvetica-Bold", 14)
    c.drawString(50, 800, data.razon_social)

    c.setFont("Helvetica", 12)
    c.drawString(50, 780, f"CUIT: {formatear_cuit(data.cuit)}")
    if data.domicilio:
        c.drawString(50, 765, data.domicilio)

    # Datos del comprobante
    c.drawString(50, 740, f"{etiqueta_comprobante(data.tipo_comprobante)} - Punto de Venta: {data.punto_venta:04d}")
    c.drawString(50, 720, f"Número: {data.punto_venta:04d}-{nro_cbte:08d}")
    c.drawString(50, 700, f"Fecha de Emisión: {dia}/{mes}/{anio}")
    c.drawString(50, 680, f"Importe Total: $ {_importe(data.importe)}")

    # Pie estilo ARCA: QR a la izquierda, CAE a la derecha
    if data.cae:
        vto = data.cae_vencimiento.strftime("%d/%m/%Y") if data.cae_vencimiento else "N/A"
        c.drawString(300, 160, f"CAE N°: {data.cae}")
        c.drawString(300, 140, f"Vto. de CAE: {vto}")
        c.drawString(160, 140, "Comprobante Autorizado")
    else:
        c.drawString(300, 160, "CAE N°: Pendiente")
        c.drawString(300, 140, "Vto. de CAE: Pendiente")

    if qr_png:
        c.drawImage(ImageReader(BytesIO(qr_png)), 50, 100, width=100, height=100)
    else:
        c.setFont("Helvetica", 8)
        c.drawString(70, 150, "QR AFIP" if data.cae else "Sin CAE")

    c.save()
    return pdf_path
