from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    ENV: str = "local"
    DB_HOST: str = "db"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "postgres"
    DB_NAME: str = "liftlog"
    # Full SQLAlchemy URL; wins over the DB_* parts when set (e.g. sqlite in tests)
    DB_URL: str | None = None

    # Auth
    SESSION_COOKIE_NAME: str = "session-token"
    SESSION_TTL_DAYS: int = 365
    SESSION_TOKEN_LENGTH: int = 32
    BCRYPT_ROUNDS: int = 10

    ALLOW_ORIGINS: str = "*"
    API_VERSION: str = "dev"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def DATABASE_URL(self) -> str:
        if self.DB_URL:
            return self.DB_URL
        return (
            f"postgresql+psycopg://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    @property
    def is_production(self) -> bool:
        return self.ENV == "production"

    @property
    def session_max_age(self) -> int:
        return self.SESSION_TTL_DAYS * 24 * 60 * 60

@lru_cache
def get_settings() -> Settings:
    return Settings()
