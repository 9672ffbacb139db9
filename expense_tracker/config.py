import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Find .env even in frozen or packaged mode
POSSIBLE_ENV_PATHS = [
    Path(__file__).resolve().parent.parent / ".env",        # normal
    Path(sys.executable).resolve().parent / ".env",         # frozen exe
    Path.cwd() / ".env",                                    # runtime cwd
]

for env_path in POSSIBLE_ENV_PATHS:
    if env_path.exists():
        load_dotenv(env_path)
        break


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./expenses.db"

    # Server
    HOST: str = "127.0.0.1"
    PORT: int = 8000
    ENVIRONMENT: str = "development"

    # Sessions
    SESSION_COOKIE_NAME: str = "sid"
    SESSION_TTL_DAYS: int = 30
    BCRYPT_ROUNDS: int = 12

    # CORS
    CORS_ORIGINS: str = "http://localhost:5173"
    CORS_CREDENTIALS: bool = True

    # Local time used for summaries and naive dates
    TIMEZONE: str = "UTC"

    # Logging
    LOG_FILE: str = "app.log"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.strip().lower() == "production"

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
