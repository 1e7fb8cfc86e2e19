from typing import Dict, List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # -------------------------------------------------
    # General
    # -------------------------------------------------
    PROJECT_NAME: str = "SchoolTools Access API"
    ENV: str = "development"

    # Which surface this instance serves ("app" = central hub,
    # otherwise a module name such as "scheduler")
    SURFACE_ID: str = Field("app", env="SURFACE_ID")

    # -------------------------------------------------
    # Frontend Domains
    # -------------------------------------------------
    HUB_URL: str = Field("https://app.schooltools.online", env="HUB_URL")
    SETUP_URL: str = Field(
        "https://app.schooltools.online/school-setup",
        env="SETUP_URL",
    )

    # module name → host serving that module
    MODULE_HOSTS: Dict[str, str] = {
        "scheduler": "https://scheduler.schooltools.online",
        "lunch-menu": "https://lunch-menu.schooltools.online",
    }

    SCHOOLTOOLS_DOMAINS: List[str] = [
        "https://schooltools.online",
        "https://app.schooltools.online",
    ]

    # -------------------------------------------------
    # CORS (auto-built below)
    # -------------------------------------------------
    BACKEND_CORS_ORIGINS: List[str] = []

    # -------------------------------------------------
    # Supabase (Primary DB & Auth)
    # -------------------------------------------------
    SUPABASE_URL: Optional[str] = Field(None, env="SUPABASE_URL")
    SUPABASE_ANON_KEY: Optional[str] = Field(None, env="SUPABASE_ANON_KEY")
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = Field(None, env="SUPABASE_SERVICE_ROLE_KEY")

    # -------------------------------------------------
    # Cross-surface session mirror
    # -------------------------------------------------
    SESSION_MIRROR_TTL_SECONDS: int = Field(
        1800,
        env="SESSION_MIRROR_TTL_SECONDS",
        description="How long a synced school selection stays valid (default: 30 minutes)",
    )

    # -------------------------------------------------
    # Model Config
    # -------------------------------------------------
    class Config:
        case_sensitive = True


# Instantiate settings
settings = Settings()

# -------------------------------------------------
# Build CORS list dynamically after loading settings
# -------------------------------------------------
cors_origins = []

# 1) the hub itself
cors_origins.append(settings.HUB_URL.rstrip("/"))

# 2) every module host
cors_origins.extend([h.rstrip("/") for h in settings.MODULE_HOSTS.values()])

# 3) marketing / root domains
cors_origins.extend([d.rstrip("/") for d in settings.SCHOOLTOOLS_DOMAINS])

# 4) remove duplicates
settings.BACKEND_CORS_ORIGINS = sorted(list(set(cors_origins)))
