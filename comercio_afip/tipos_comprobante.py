from typing import Optional

# Códigos asignados por ARCA (tabla de tipos de comprobante de WSFEv1).
# No se inventan: si un tipo no está acá, no tiene QR fiscal.
TIPO_COMPROBANTE_MAP = {
    "factura_a": 1,
    "factura_b": 6,
    "factura_c": 11,
    "nota_credito_a": 3,
    "nota_credito_b": 8,
    "nota_credito_c": 13,
    "nota_debito_a": 2,
    "nota_debito_b": 7,
    "nota_debito_c": 12,
    "recibo_a": 4,
    "recibo_b": 9,
    "recibo_c": 15,
}

# Todos los comprobantes que puede emitir una venta, en el orden del listado.
TIPOS_COMPROBANTE = {
    "ticket_fiscal": "Ticket Fiscal",
    "factura_a": "Factura A",
    "factura_b": "Factura B",
    "factura_c": "Factura C",
    "nota_credito_a": "Nota de Crédito A",
    "nota_credito_b": "Nota de Crédito B",
    "nota_credito_c": "Nota de Crédito C",
    "nota_debito_a": "Nota de Débito A",
    "nota_debito_b": "Nota de Débito B",
    "nota_debito_c": "Nota de Débito C",
    "recibo_a": "Recibo A",
    "recibo_b": "Recibo B",
    "recibo_c": "Recibo C",
    "factura_exportacion": "Factura de Exportación",
}


def resolver_tipo_comprobante(codigo: str) -> Optional[int]:
    """
    Devuelve el código numérico de ARCA para un tipo interno
    (ej. 'factura_b' -> 6) o None si no existe.
    """
    return TIPO_COMPROBANTE_MAP.get(codigo)


def etiqueta_comprobante(codigo: str) -> str:
    return TIPOS_COMPROBANTE.get(codigo, codigo)
