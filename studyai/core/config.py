from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "StudyAI Orchestrator"
    environment: str = "development"
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"

    # ── LLM provider (OpenAI-compatible chat completions gateway) ────────
    llm_api_key: str | None = None
    llm_base_url: str = "https://ai.gateway.lovable.dev/v1"
    llm_max_retries: int = 1
    # Classifier always uses its own cheap model, never a routed tier
    classifier_model: str = "google/gemini-2.5-flash-lite"
    classifier_max_tokens: int = 150
    classifier_temperature: float = 0.1
    classifier_timeout_seconds: float = 10.0
    # Tier -> model routing table
    fast_model: str = "google/gemini-2.5-flash"
    default_model: str = "google/gemini-3-flash-preview"
    complex_model: str = "google/gemini-2.5-pro"
    generation_max_tokens: int = 4000
    generation_timeout_seconds: float = 60.0
    precise_temperature: float = 0.3  # MATH / CODE intents
    creative_temperature: float = 0.7  # everything else

    # ── Retrieval service ────────────────────────────────────────────────
    retrieval_url: str | None = None
    retrieval_api_key: str | None = None
    retrieval_timeout_seconds: float = 8.0

    # ── Authentication service ───────────────────────────────────────────
    auth_verify_url: str | None = None
    auth_api_key: str | None = None
    auth_timeout_seconds: float = 5.0

    # ── HTTP ─────────────────────────────────────────────────────────────
    cors_allow_origins: list[str] = ["*"]
    disconnect_poll_seconds: float = 0.5

    class Config:
        env_file = ".env"
        extra = "ignore"  # Ignore extra environment variables that aren't in the Settings class


settings = Settings()
