import base64
import logging
from io import BytesIO
from typing import Protocol

import qrcode
from qrcode.exceptions import DataOverflowError
from PIL import Image

from .exceptions import QRRenderingFailed
from .models import OpcionesQR

logger = logging.getLogger(__name__)

NIVELES_CORRECCION = {
    "L": qrcode.constants.ERROR_CORRECT_L,
    "M": qrcode.constants.ERROR_CORRECT_M,
    "Q": qrcode.constants.ERROR_CORRECT_Q,
    "H": qrcode.constants.ERROR_CORRECT_H,
}

DATA_URI_PNG = "data:image/png;base64,"


class QREncoder(Protocol):
    """Convierte una URL en una imagen QR embebible."""

    def encode(self, url: str, opciones: OpcionesQR) -> str:
        ...


class QRCodeEncoder:
    """
    Encoder por defecto basado en la librería qrcode + Pillow.
    Devuelve un data URI PNG de exactamente `width` x `width` píxeles.
    """

    def encode(self, url: str, opciones: OpcionesQR) -> str:
        return DATA_URI_PNG + base64.b64encode(self.png(url, opciones)).decode("ascii")

    def png(self, url: str, opciones: OpcionesQR) -> bytes:
        qr = qrcode.QRCode(
            version=None,
            error_correction=NIVELES_CORRECCION[opciones.error_correction],
            box_size=1,
            border=opciones.margin,
        )
        try:
            qr.add_data(url)
            qr.make(fit=True)
        except (DataOverflowError, ValueError) as e:
            raise QRRenderingFailed(
                f"No se pudo codificar el QR con corrección {opciones.error_correction}: {e}"
            ) from e

        # Tamaño de módulo entero más grande que entra en el ancho pedido
        modulos = qr.modules_count + 2 * opciones.margin
        qr.box_size = max(1, opciones.width // modulos)

        img = qr.make_image(fill_color="black", back_color="white").get_image()
        if img.size != (opciones.width, opciones.width):
            img = img.resize(
                (opciones.width, opciones.width), Image.Resampling.NEAREST
            )

        buffer = BytesIO()
        img.save(buffer, format="PNG")
        logger.debug(
            "QR renderizado: versión %s, %d módulos, %dpx",
            qr.version, qr.modules_count, opciones.width,
        )
        return buffer.getvalue()


def data_uri_a_bytes(data_uri: str) -> bytes:
    """Extrae los bytes PNG de un data URI (para incrustarlo en el PDF)."""
    if not data_uri.startswith("data:") or "," not in data_uri:
        raise ValueError("No es un data URI")
    return base64.b64decode(data_uri.split(",", 1)[1])
