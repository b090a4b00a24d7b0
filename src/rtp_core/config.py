# src/rtp_core/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    RTP Assistant configuration.
    Loads variables from .env file or environment variables.
    """
    # --- Model oracle ---
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.5-flash"
    GEMINI_TIMEOUT_MS: int = 60000
    RESTAURANT_NAME: str = "Ramen To The People"

    # --- Persistence ---
    # "supabase" talks to the hosted store, "memory" keeps everything in-process
    STORE_BACKEND: str = "supabase"
    SUPABASE_URL: str = ""
    SUPABASE_SERVICE_KEY: str = ""
    STORE_TIMEOUT_SECONDS: float = 10.0

    # --- Confirmation integrity ---
    # Empty disables proposal signing.
    ACTION_SIGNING_KEY: str = ""

    # --- Observability ---
    RTP_LOG_LEVEL: str = "INFO"

    # --- Network ---
    RTP_FRONTEND_ORIGINS: str = "http://localhost:3000,http://127.0.0.1:3000"
    ASSISTANT_API_URL: str = "http://127.0.0.1:8000"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        env_file_encoding='utf-8'
    )

    @property
    def frontend_origins(self) -> list[str]:
        return [origin.strip() for origin in self.RTP_FRONTEND_ORIGINS.split(",") if origin.strip()]


# Initialize a global settings instance
settings = Settings()
