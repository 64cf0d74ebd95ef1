from datetime import date, datetime
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class InvoiceQRRequest(BaseModel):
    fecha: Union[datetime, date, str]   # fecha de emisión (ISO 8601)
    cuit: str                           # CUIT del emisor, con o sin guiones
    punto_venta: int = Field(gt=0)
    tipo_comprobante: str               # factura_a, nota_credito_b, ...
    numero_comprobante: str             # Formato: 0001-00000123
    importe: float = Field(ge=0, allow_inf_nan=False)
    cae: Optional[str] = None           # sin CAE no hay QR
    tipo_doc_rec: Optional[int] = None  # 80=CUIT, 96=DNI, 99=Sin identificar
    nro_doc_rec: Optional[int] = None


class PayloadQRAfip(BaseModel):
    """
    Datos del QR según la especificación de ARCA. Los nombres de campo
    son los del esquema oficial y el orden de declaración es el del JSON.
    """
    model_config = ConfigDict(frozen=True)

    ver: int = 1
    fecha: str
    cuit: int
    ptoVta: int
    tipoCmp: int
    nroCmp: int
    importe: float
    moneda: str = "PES"
    ctz: int = 1
    tipoDocRec: Optional[int] = None
    nroDocRec: Optional[int] = None
    tipoCodAut: str = "E"  # "E" = CAE; CAEA ("A") no está soportado
    codAut: int


class OpcionesQR(BaseModel):
    model_config = ConfigDict(frozen=True)

    error_correction: Literal["L", "M", "Q", "H"] = "M"
    width: int = Field(default=200, gt=0)
    margin: int = Field(default=1, ge=0)


class QRResponse(BaseModel):
    autorizado: bool
    url: Optional[str] = None
    imagen: Optional[str] = None  # data URI PNG
    payload: Optional[dict] = None


class TipoComprobanteInfo(BaseModel):
    codigo: str
    descripcion: str
    codigo_arca: Optional[int] = None


class CuitInfo(BaseModel):
    valido: bool
    cuit: str
    es_dni: bool
    tipo_persona: Optional[Literal["fisica", "juridica"]] = None
    candidatos: List[str] = []


class ContactoRequest(BaseModel):
    email: Optional[str] = None
    telefono: Optional[str] = None


class ContactoInfo(BaseModel):
    email_valido: Optional[bool] = None     # None = no informado
    telefono_valido: Optional[bool] = None


class FacturaPDFRequest(InvoiceQRRequest):
    razon_social: str
    domicilio: Optional[str] = None
    cae_vencimiento: Optional[date] = None


class FacturaPDFResponse(BaseModel):
    pdf: str  # Ruta al PDF generado, relativa al servidor
