"""
Application configuration settings
"""

from pydantic_settings import BaseSettings
from pydantic import computed_field
from functools import lru_cache
from typing import List, Optional
from urllib.parse import quote_plus


class Settings(BaseSettings):
    # Database Configuration (Individual Parameters)
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "tiptop"
    db_user: str = "postgres"
    db_password: str = ""
    db_driver: str = "postgresql"  # Only this has a default since it's unlikely to change
    db_url: Optional[str] = None  # Full SQLAlchemy URL, overrides the individual parameters

    @computed_field
    @property
    def database_url(self) -> str:
        """Compile database URL from individual parameters"""
        if self.db_url:
            return self.db_url

        # For Cloud SQL Unix sockets, don't include the socket path in the URL
        # It will be passed via connect_args in database.py
        encoded_user = quote_plus(self.db_user)
        encoded_password = quote_plus(self.db_password)

        if self.db_host.startswith('/cloudsql/'):
            return f"{self.db_driver}://{encoded_user}:{encoded_password}@/{self.db_name}"
        return f"{self.db_driver}://{encoded_user}:{encoded_password}@{self.db_host}:{self.db_port}/{self.db_name}"

    # Security - shared secret of the external auth provider that signs bearer tokens
    secret_key: str
    algorithm: str = "HS256"

    # Application
    app_name: str = "TipTop"
    debug: bool = False
    app_url: str = "https://tiptop.review"  # Public base URL used in emails and QR links

    # CORS - loaded from environment
    allowed_origins: str = "http://localhost:3000"

    # Review intake
    review_rate_limit_hours: int = 24
    max_active_qr_tokens: int = 10

    # Email/SMTP Configuration (Optional - for review and welcome notifications)
    smtp_host: Optional[str] = None
    smtp_port: Optional[int] = None
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_from_email: Optional[str] = None

    # Logging Configuration
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_to_file: bool = False
    log_file_path: str = "logs/app.log"
    log_max_size_mb: int = 10
    log_backup_count: int = 5
    log_to_console: bool = True
    log_verbosity: str = "minimal"  # "minimal" or "full" - full also echoes SQL statements

    def get_allowed_origins(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.allowed_origins.split(',') if origin.strip()]

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache()
def get_settings():
    return Settings()


settings = get_settings()
