from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


def choose_env_file() -> str:
    return ".env.local" if Path(".env.local").exists() else ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=choose_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # tolerate unrelated env vars
    )

    # Stable storage
    DATABASE_PATH: str = "posts.db"
    STORE_MAX_ENTRIES: int = 0  # 0 = unbounded
    POSTS_MEMORY_ID: int = 0

    # Logging
    LOG_LEVEL: str = "INFO"

    @property
    def database_url(self) -> str:
        if self.DATABASE_PATH == ":memory:":
            return "sqlite://"
        return f"sqlite:///{self.DATABASE_PATH}"


# Global settings instance (evaluated at import, but reads env on construction)
settings = Settings()
