# File: app/core/config.py

from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    .env file may contain (all optional, defaults shown):

    - DATABASE_URL=sqlite+pysqlite:///:memory:
    - SEED_DEMO_DATA=true (load the six reference issues on startup)
    - ALLOW_STATUS_REVERSION=false (permit moving an issue backwards)
    - BACKEND_CORS_ORIGINS=http://localhost:3000,http://127.0.0.1:3000
    - LOG_LEVEL=INFO
    - RATE_LIMIT_ENABLED=true
    - CREATE_RATE_LIMIT=10/minute
    - LIST_RATE_LIMIT=60/minute
    - ANALYZE_RATE_LIMIT=10/minute

    Collaborators (no defaults - features degrade when unset):
    - SUPABASE_URL=https://your-project.supabase.co
    - SUPABASE_SERVICE_ROLE=your-service-role-key
    - SUPABASE_BUCKET=issue-photos
    - GEMINI_API_KEY=your-gemini-key
    - GEMINI_MODEL=gemini-1.5-flash
    - GEOLOCATION_URL=http://ip-api.com/json/
    - GEOLOCATION_TIMEOUT=10
    """
    database_url: str = Field(default="sqlite+pysqlite:///:memory:", alias="DATABASE_URL")
    seed_demo_data: bool = Field(default=True, alias="SEED_DEMO_DATA")
    allow_status_reversion: bool = Field(default=False, alias="ALLOW_STATUS_REVERSION")
    backend_cors_origins: str = Field(
        default="http://localhost:3000,http://127.0.0.1:3000",
        alias="BACKEND_CORS_ORIGINS",
    )
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    rate_limit_enabled: bool = Field(default=True, alias="RATE_LIMIT_ENABLED")
    create_rate_limit: str = Field(default="10/minute", alias="CREATE_RATE_LIMIT")
    list_rate_limit: str = Field(default="60/minute", alias="LIST_RATE_LIMIT")
    analyze_rate_limit: str = Field(default="10/minute", alias="ANALYZE_RATE_LIMIT")

    supabase_url: Optional[str] = Field(default=None, alias="SUPABASE_URL")
    supabase_service_role: Optional[str] = Field(default=None, alias="SUPABASE_SERVICE_ROLE")
    supabase_bucket: str = Field(default="issue-photos", alias="SUPABASE_BUCKET")

    gemini_api_key: Optional[str] = Field(default=None, alias="GEMINI_API_KEY")
    gemini_model: str = Field(default="gemini-1.5-flash", alias="GEMINI_MODEL")

    geolocation_url: str = Field(default="http://ip-api.com/json/", alias="GEOLOCATION_URL")
    geolocation_timeout: float = Field(default=10.0, alias="GEOLOCATION_TIMEOUT")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

def cors_origins_list() -> List[str]:
    raw = settings.backend_cors_origins or ""
    return [x.strip().rstrip("/") for x in raw.split(",") if x.strip()]

settings = Settings()
