from pydantic import Field
from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    # App Info
    app_name: str = "Caja API"
    version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    database_url: str
    db_pool_size: int = 5
    db_max_overflow: int = 10
    auto_create_tables: bool = False

    # Security
    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440  # 1 día

    # CORS
    allowed_origins: List[str] = [
        "http://localhost:3000",
        "http://localhost:4001",
    ]

    # SMTP
    smtp_host: Optional[str] = None
    smtp_port: int = 587
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_use_tls: bool = False
    smtp_start_tls: bool = True
    email_from: Optional[str] = None

    # Emisor de comprobantes
    company_name: str = Field(default="Empresa Ejemplo S.A.C.", description="Razón social del emisor")
    company_ruc: str = Field(default="20123456789", description="RUC del emisor")
    company_address: str = Field(default="Av. Siempre Viva 123, Lima", description="Dirección fiscal")

    # Impuestos
    igv_rate: float = Field(default=0.18, description="Tasa de IGV")

    # Server
    host: str = "0.0.0.0"
    port: int = 4001

    class Config:
        env_file = ".env"
        case_sensitive = False

settings = Settings()
