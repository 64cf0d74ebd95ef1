class ComprobanteQRError(Exception):
    """Error base al generar el QR fiscal de un comprobante."""


class UnsupportedInvoiceType(ComprobanteQRError, ValueError):
    """El tipo de comprobante no tiene código ARCA para el QR."""

    def __init__(self, tipo_comprobante: str):
        self.tipo_comprobante = tipo_comprobante
        super().__init__(
            f"Tipo de comprobante {tipo_comprobante} no válido para QR AFIP"
        )


class InvalidInvoiceData(ComprobanteQRError, ValueError):
    """Datos del comprobante que no se pueden convertir al formato del QR."""


class QRRenderingFailed(ComprobanteQRError):
    """La librería de QR rechazó la URL (por ejemplo, datos demasiado largos)."""
