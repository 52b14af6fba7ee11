from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_anon_key: Optional[str] = None  # Served to the browser client
    supabase_service_role_key: Optional[str] = None  # Used by background analysis to bypass RLS

    # Tables / buckets
    food_images_bucket: str = "food-images"
    scan_limits_table: str = "scan_limits"  # set to scan_limits_v2 for the newer table

    # OpenRouter (OpenAI-compatible API)
    openrouter_api_key: Optional[str] = None
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    default_ai_model: str = "meta-llama/llama-4-maverick:free"
    available_ai_models: str = (
        "meta-llama/llama-4-maverick:free,"
        "google/gemini-2.0-flash-exp:free,"
        "opengvlab/internvl3-14b:free,"
        "google/gemma-3-27b-it:free,"
        "mistralai/mistral-small-3.1-24b-instruct:free"
    )
    analysis_max_tokens: int = 1000

    # AWS S3 (optional image storage, will read from uppercase env vars automatically)
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_region: str = "us-east-1"
    s3_bucket_name: Optional[str] = None

    # Scanning
    default_max_scans: int = 10
    max_upload_size_mb: int = 5
    scan_processing_mode: str = "async"  # async | sync
    recent_scans_limit: int = 3
    chat_history_limit: int = 10

    # App
    app_name: str = "can-i-eat-this-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    allow_dev_auth_fallback: bool = False  # x-user-id header auth, development only

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def dev_auth_fallback_enabled(self) -> bool:
        return self.allow_dev_auth_fallback and self.environment == "development"

    @property
    def max_upload_size_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def get_available_models_list(self) -> List[str]:
        models = [m.strip() for m in self.available_ai_models.split(",") if m.strip()]
        if self.default_ai_model not in models:
            models.insert(0, self.default_ai_model)
        return models

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
