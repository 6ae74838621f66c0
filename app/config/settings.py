from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    # App Info
    app_name: str = "Inventario SaaS API"
    version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    database_url: str

    # Security
    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 480  # 8 horas, una jornada

    # CORS
    allowed_origins: List[str] = Field(
        default=["http://127.0.0.1:5500", "http://localhost:5500"],
        description="Orígenes permitidos para el frontend"
    )

    # Registro de empresas
    allowed_email_domains: List[str] = Field(
        default=["gmail.com", "outlook.com", "yahoo.com", "icloud.com"],
        description="Dominios de correo aceptados al registrar una empresa"
    )
    super_admin_tenant_id: str = "super_admin"

    # Registros protegidos que se crean con cada empresa
    default_cliente_nombre: str = "público general"
    default_vendedor_nombre: str = "administrador"

    # Server
    host: str = "0.0.0.0"
    port: int = 4000

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

settings = Settings()
