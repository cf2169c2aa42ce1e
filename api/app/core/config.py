"""
Configuracion central de la aplicacion.
Gestiona variables de entorno y configuraciones globales.
Soporta configuracion dinamica para desarrollo (ENVIRONMENT=development)
y produccion (ENVIRONMENT=production).
"""
import json
from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field, computed_field


class Settings(BaseSettings):
    """
    Clase de configuracion de la aplicacion.
    Lee variables de entorno y proporciona valores por defecto.

    Grupos de configuracion:
    - Aplicacion / servidor
    - Base de datos (DATABASE_URL completa o por componentes)
    - CourtListener (API key y URL base)
    - Presupuesto de sincronizacion (SYNC_*): limites por invocacion
    """

    # Configuracion de la aplicacion
    APP_NAME: str = Field(default="JudgeFinder Sync")
    APP_VERSION: str = Field(default="1.0.0")
    DEBUG: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="production")

    # Configuracion del servidor
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8000)

    # Base de datos - Componentes separados (recomendado para flexibilidad)
    DATABASE_HOST: str = Field(default="localhost")
    DATABASE_PORT: int = Field(default=5432)
    DATABASE_USER: str = Field(default="judgefinder")
    DATABASE_PASSWORD: str = Field(default="judgefinder")
    DATABASE_NAME: str = Field(default="judgefinder")

    # Base de datos - URL completa (override de componentes si se proporciona)
    DATABASE_URL: str = Field(default="")
    DB_POOL_SIZE: int = Field(default=5)
    DB_MAX_OVERFLOW: int = Field(default=10)

    # CORS (acepta lista JSON o "*" para todos los origenes)
    CORS_ORIGINS: str = Field(default="*")

    # CourtListener
    COURTLISTENER_API_KEY: str = Field(default="")
    COURTLISTENER_BASE_URL: str = Field(default="https://www.courtlistener.com/api/rest/v4")
    COURTLISTENER_TIMEOUT_S: int = Field(default=30)
    COURTLISTENER_PAGE_SIZE: int = Field(default=100)

    # API key para disparar syncs desde HTTP (vacio = sin proteccion, solo dev)
    SYNC_API_KEY: str = Field(default="")

    # Presupuesto y ritmo del motor de sync
    SYNC_BATCH_SIZE: int = Field(default=10)
    SYNC_MAX_BATCH_SIZE: int = Field(default=25)
    SYNC_PER_RUN_ENTITY_LIMIT: int = Field(default=250)
    SYNC_PER_RUN_CREATE_LIMIT: int = Field(default=150)
    SYNC_STALENESS_DAYS: int = Field(default=7)
    SYNC_STALENESS_LIMIT: int = Field(default=100)
    SYNC_KNOWN_IDS_PAGE_SIZE: int = Field(default=1000)
    SYNC_DISCOVER_MIN: int = Field(default=50)
    SYNC_INTER_BATCH_DELAY_S: float = Field(default=2.0)
    SYNC_PAGE_DELAY_S: float = Field(default=1.0)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str = Field(default="logs/app.log")

    @computed_field
    @property
    def effective_database_url(self) -> str:
        """
        Retorna la URL de base de datos efectiva.
        Si DATABASE_URL esta definida, la usa directamente.
        Si no, construye la URL desde los componentes individuales.
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}"
            f"@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}"
        )

    @computed_field
    @property
    def is_development(self) -> bool:
        """Indica si el entorno es de desarrollo."""
        return self.ENVIRONMENT.lower() == "development"

    class Config:
        """Configuracion de Pydantic."""
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignorar campos extra del .env


def get_cors_origins(cors_string: str) -> List[str]:
    """
    Parsea la configuracion de CORS.
    Acepta "*" para todos los origenes o una lista JSON.
    """
    if cors_string == "*":
        return ["*"]
    try:
        return json.loads(cors_string)
    except json.JSONDecodeError:
        # Si no es JSON valido, retornar como lista simple
        return [origin.strip() for origin in cors_string.split(",")]


# Instancia global de configuracion
settings = Settings()
