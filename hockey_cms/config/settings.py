from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Bypasses RLS; used by the job processor

    # Gemini
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.0-flash-exp"

    # Auth
    admin_auth_required: bool = True  # CMS routes require a valid bearer token

    # Generation jobs
    job_runner_token: Optional[str] = None  # Shared secret expected in X-Job-Token when set
    job_delay_seconds: float = 20.0
    job_max_attempts: int = 3
    job_worker_enabled: bool = False
    job_worker_interval_seconds: float = 60.0

    # Local markdown files
    prompts_dir: str = "prompts"
    topics_dir: str = "config/content-topics"

    # App
    app_name: str = "hockey-cms"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"
    rate_limit: str = "200/minute"  # slowapi format, e.g. "100/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",
        extra="ignore"
    )


settings = Settings()
