import re
from typing import List, Optional

# Prefijos válidos para CUIT de personas físicas
PREFIJOS_PERSONA_FISICA = ["20", "23", "24", "27"]
# Prefijos válidos para CUIT de personas jurídicas
PREFIJOS_PERSONA_JURIDICA = ["30", "33", "34"]

MULTIPLICADORES_CUIT = [5, 4, 3, 2, 7, 6, 5, 4, 3, 2]

_SEPARADORES = re.compile(r"[-\s]")
_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_TELEFONO = re.compile(r"^(\+54\s?)?(\d{2,4}[-\s]?)?\d{6,8}$")


def _limpiar(valor: str) -> str:
    return _SEPARADORES.sub("", valor)


def calcular_digito_verificador(cuit_sin_digito: str) -> int:
    """Dígito verificador (módulo 11) de los primeros 10 dígitos de un CUIT."""
    suma = sum(
        int(digito) * mult
        for digito, mult in zip(cuit_sin_digito, MULTIPLICADORES_CUIT)
    )
    resto = suma % 11
    return resto if resto < 2 else 11 - resto


def validar_cuit(cuit: str) -> bool:
    limpio = _limpiar(cuit)
    if not re.fullmatch(r"\d{11}", limpio):
        return False
    return int(limpio[10]) == calcular_digito_verificador(limpio[:10])


def generar_cuits_desde_dni(dni: str) -> List[str]:
    """
    Posibles CUIT de una persona física a partir de su DNI,
    uno por cada prefijo (20, 23, 24, 27).
    """
    dni_limpio = re.sub(r"\D", "", dni).zfill(8)
    if len(dni_limpio) > 8:
        return []

    cuits = []
    for prefijo in PREFIJOS_PERSONA_FISICA:
        base = prefijo + dni_limpio
        cuits.append(base + str(calcular_digito_verificador(base)))
    return cuits


def tipo_persona(cuit: str) -> Optional[str]:
    """Persona "fisica" o "juridica" según el prefijo del CUIT; None si no es válido."""
    if not validar_cuit(cuit):
        return None
    prefijo = _limpiar(cuit)[:2]
    if prefijo in PREFIJOS_PERSONA_FISICA:
        return "fisica"
    if prefijo in PREFIJOS_PERSONA_JURIDICA:
        return "juridica"
    return None


def es_dni(valor: str) -> bool:
    # Un DNI tiene 7 u 8 dígitos
    return re.fullmatch(r"\d{7,8}", _limpiar(valor)) is not None


def formatear_cuit(cuit: str) -> str:
    limpio = _limpiar(cuit)
    if len(limpio) == 11:
        return f"{limpio[:2]}-{limpio[2:10]}-{limpio[10:]}"
    return cuit


def validar_email(email: str) -> bool:
    return _EMAIL.match(email) is not None


def validar_telefono(telefono: str) -> bool:
    return _TELEFONO.match(re.sub(r"\s", "", telefono)) is not None
