"""Configuration management for the Fretes admin client."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FRETES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ==========================================================================
    # Application
    # ==========================================================================
    APP_NAME: str = "Fretes Admin"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "WARNING"

    # ==========================================================================
    # Shipping API
    # ==========================================================================
    API_BASE_URL: str = Field(
        default="http://localhost:8080",
        description="Base URL of the shipping backend",
    )
    API_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)

    # ==========================================================================
    # Hire Workflow
    # ==========================================================================
    # Drop quote responses issued for a selection that is no longer current.
    # False restores last-arrival-wins.
    DISCARD_STALE_QUOTES: bool = True

    @property
    def log_level(self) -> str:
        """Effective log level, DEBUG when the debug flag is on."""
        return "DEBUG" if self.DEBUG else self.LOG_LEVEL.upper()


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience alias
settings = get_settings()


# ==========================================================================
# Destination states accepted by the backend
# ==========================================================================
BRAZILIAN_STATES: set[str] = {
    "AC", "AL", "AP", "AM", "BA", "CE", "DF", "ES", "GO",
    "MA", "MT", "MS", "MG", "PA", "PB", "PR", "PE", "PI",
    "RJ", "RN", "RS", "RO", "RR", "SC", "SP", "SE", "TO",
}

# Display labels for package statuses
STATUS_LABELS: dict[str, str] = {
    "criado": "Criado",
    "esperando_coleta": "Esperando Coleta",
    "coletado": "Coletado",
    "enviado": "Enviado",
    "entregue": "Entregue",
    "extraviado": "Extraviado",
}
