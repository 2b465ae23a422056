from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROGRAM_DATABASE_URL: str = "sqlite:///./program_service.db"
    GEMINI_API_KEY: str = ""
    GOOGLE_API_KEY: str = ""
    LLM_MODEL: str = "gemini-2.5-flash"
    GENERATION_MAX_OUTPUT_TOKENS: int = 40000
    GENERATION_TEMPERATURE: float = 0.4
    GENERATION_ATTEMPT_TIMEOUT_SECONDS: float = 180.0
    PROGRAM_HISTORY_LIMIT: int = 2
    PROFILE_SERVICE_URL: str = "http://accounts-service:8006"
    PROFILE_SERVICE_TIMEOUT_SECONDS: float = 10.0
    CELERY_BROKER_URL: str = "redis://redis:6379/1"
    CELERY_RESULT_BACKEND: str = "redis://redis:6379/2"
    CELERY_PROGRAM_QUEUE: str = "program.llm"
    CELERY_TASK_TIME_LIMIT: int = 900

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @property
    def database_url(self) -> str:
        url = self.PROGRAM_DATABASE_URL
        if url.startswith("postgresql+asyncpg://"):
            return url.replace("postgresql+asyncpg://", "postgresql+psycopg2://", 1)
        if url.startswith("postgresql://"):
            return url.replace("postgresql://", "postgresql+psycopg2://", 1)
        return url

    @property
    def genai_api_key(self) -> str:
        return self.GEMINI_API_KEY or self.GOOGLE_API_KEY


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
