from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # OpenAI-compatible chat completions
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    summary_model: str = "gpt-3.5-turbo"

    # Exa search
    exa_api_key: str = ""
    exa_base_url: str = "https://api.exa.ai"
    exa_timeout_seconds: float = 30.0

    # Supabase (auth + PostgREST tables)
    supabase_url: str = ""
    supabase_anon_key: str = ""
    default_session_name: str = "New Research Session"

    # App
    cors_origins: str = "http://localhost:3000"
    app_log_level: str = "INFO"
    noisy_log_level: str = "WARNING"
    log_dir: str = "logs"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
