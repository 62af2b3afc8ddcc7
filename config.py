# config.py
import os
from typing import Optional, List
from sqlalchemy.engine.url import make_url
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # ==================== Básico ==================== #
    APP_NAME: str = "Coletor Analytics API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # ==================== Banco de Dados ==================== #
    # Em produção aponta para o PostgreSQL; localmente um arquivo SQLite basta.
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./coletor.db")

    @property
    def database_backend(self) -> str:
        return make_url(self.DATABASE_URL).get_backend_name()

    @property
    def is_sqlite(self) -> bool:
        return self.database_backend == "sqlite"

    # ==================== Redis (cache de geolocalização) ==================== #
    REDIS_URL: Optional[str] = os.getenv("REDIS_URL")
    GEO_CACHE_TTL: int = int(os.getenv("GEO_CACHE_TTL", "86400"))  # 1 dia

    # ==================== Geolocalização (ip-api.com) ==================== #
    IP_API_URL: str = os.getenv("IP_API_URL", "http://ip-api.com/json")
    IP_API_TIMEOUT: float = float(os.getenv("IP_API_TIMEOUT", "5.0"))
    IP_API_FIELDS: str = "status,message,country,regionName,city,zip,isp,as,lat,lon,proxy,mobile,hosting"

    # ==================== Coletor ==================== #
    # URL pública do coletor, exibida no resumo do projeto para montar o snippet
    COLLECTOR_ORIGIN: str = os.getenv("COLLECTOR_ORIGIN", "")

    # ==================== CORS ==================== #
    # O script roda embutido em páginas de terceiros: por padrão aceita qualquer origem.
    # Lista separada por vírgula (texto puro: pydantic-settings tentaria ler List como JSON)
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    # ---------- Aliases em minúsculo (compatibilidade) ---------- #
    @property
    def app_version(self) -> str:
        return self.APP_VERSION

    # ---------- Aliases esperados pelo middleware ---------- #
    @property
    def is_development(self) -> bool:
        # considera dev se ENVIRONMENT=development OU DEBUG=True
        return self.ENVIRONMENT.lower() == "development" or self.DEBUG is True

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    # ---------- Config Pydantic v2 ---------- #
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Instância global
settings = Settings()
