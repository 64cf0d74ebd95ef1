import os
from datetime import timedelta, timezone

# ——————————————————————————————————————————————————————————————
# Configuración leída de variables de entorno
# ——————————————————————————————————————————————————————————————
class Settings:
    def __init__(self):
        # "homo" = homologación / "prod" = producción
        self.ENVIRONMENT = os.getenv("ENVIRONMENT", "homo").strip().lower()
        if self.ENVIRONMENT not in ("homo", "prod"):
            raise RuntimeError(
                f"ENVIRONMENT inválido: {self.ENVIRONMENT}. Debe ser 'homo' o 'prod'"
            )

        # Host del validador de QR de ARCA (ex AFIP)
        self.AFIP_QR_HOST = os.getenv("AFIP_QR_HOST", "www.arca.gob.ar").strip()

        # Argentina no tiene horario de verano: UTC-3 fijo
        self.TZ_OFFSET_HORAS = int(os.getenv("TZ_OFFSET_HORAS", "-3"))

        self.COMPROBANTES_DIR = os.getenv("COMPROBANTES_DIR", "comprobantes")
        self.CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def zona_horaria(self) -> timezone:
        return timezone(timedelta(hours=self.TZ_OFFSET_HORAS))

    @property
    def ambiente(self) -> str:
        return "produccion" if self.ENVIRONMENT == "prod" else "homologacion"


settings = Settings()
