import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "False") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass
class Settings:
    # Veritabanı Ayarları
    # DB boşsa bellek içi depolama kullanılır
    database_url: str = os.getenv("DB", "")
    database_name: str = os.getenv("DB_NAME", "personal_library")
    database_timeout_ms: int = int(os.getenv("DB_TIMEOUT_MS", "5000"))

    # API Ayarları
    api_host: str = os.getenv("API_HOST", "127.0.0.1")
    api_port: int = int(os.getenv("API_PORT", "3000"))

    # Uygulama Ayarları
    app_name: str = os.getenv("APP_NAME", "Personal Library")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
    debug: bool = _env_flag("DEBUG")


settings = Settings()
