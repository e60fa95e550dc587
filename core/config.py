from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # -------------------------------------------------
    # General
    # -------------------------------------------------
    PROJECT_NAME: str = "Gestión Comercial API"
    ENV: str = "development"

    # -------------------------------------------------
    # Frontend Domains (comma separated)
    # -------------------------------------------------
    FRONTEND_ORIGINS: Optional[str] = None

    DEFAULT_FRONTEND_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # -------------------------------------------------
    # CORS (auto-built below)
    # -------------------------------------------------
    BACKEND_CORS_ORIGINS: List[str] = []

    # -------------------------------------------------
    # Supabase (Primary DB, Auth & Storage)
    # -------------------------------------------------
    SUPABASE_URL: Optional[str] = None
    SUPABASE_ANON_KEY: Optional[str] = None
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = None

    # -------------------------------------------------
    # Tables & buckets (names as created in Supabase)
    # -------------------------------------------------
    PROFILES_TABLE: str = "profiles"
    COTIZACIONES_TABLE: str = "Log de Cotizaciones"
    REQUERIMIENTOS_TABLE: str = "Detalle de Requerimientos"
    DETALLE_REQS_TABLE: str = "Detalle Reqs"
    COTIZACIONES_BUCKET: str = "cotizaciones"

    # -------------------------------------------------
    # Administration
    # -------------------------------------------------
    # Account that is always kept as an active admin
    ADMIN_EMAIL: Optional[str] = Field(None, description="Bootstrap administrator email")

    MAX_ATTACHMENT_BYTES: int = Field(25 * 1024 * 1024, description="Upload size limit for quotation attachments")

    # -------------------------------------------------
    # Model Config
    # -------------------------------------------------
    class Config:
        case_sensitive = True
        # Real environment variables only (no .env file)


# Instantiate settings
settings = Settings()

# -------------------------------------------------
# Build CORS list dynamically after loading settings
# -------------------------------------------------
cors_origins = []

# 1) add configured frontend domains
if settings.FRONTEND_ORIGINS:
    for domain in settings.FRONTEND_ORIGINS.split(","):
        domain = domain.strip()
        if not domain:
            continue
        if not domain.startswith("http"):
            domain = f"https://{domain}"
        cors_origins.append(domain.rstrip("/"))

# 2) add local development origins
cors_origins.extend([d.rstrip("/") for d in settings.DEFAULT_FRONTEND_ORIGINS])

# 3) remove duplicates
settings.BACKEND_CORS_ORIGINS = sorted(list(set(cors_origins)))
