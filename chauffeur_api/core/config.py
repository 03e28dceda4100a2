from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic_settings import BaseSettings

PACKAGE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    app_name: str = "Presidential Chauffeurs API"
    ENVIRONMENT: str = "development"
    PORT: int = 3001

    # Mail transport; sending is disabled while credentials are empty
    EMAIL_USER: str = ""
    EMAIL_PASS: str = ""
    EMAIL_TO: Optional[str] = None
    EMAIL_FROM_NAME: str = "Presidential Chauffeurs"
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_TIMEOUT: float = 30.0

    RECAPTCHA_SECRET: str = ""
    RECAPTCHA_SCORE_THRESHOLD: float = 0.5
    RECAPTCHA_VERIFY_URL: str = "https://www.google.com/recaptcha/api/siteverify"
    RECAPTCHA_EXPECTED_ACTION: Optional[str] = "vehicleInquiry"
    RECAPTCHA_REQUIRED: bool = True
    RECAPTCHA_ALLOW_TEST_TOKEN: bool = False
    RECAPTCHA_TEST_TOKEN: str = "TESTING_TOKEN"
    RECAPTCHA_TIMEOUT: float = 10.0
    VERIFICATION_CACHE_TTL: float = 300.0
    VERIFICATION_CACHE_SIZE: int = 1000

    VEHICLES_FILE: Path = PACKAGE_DIR / "data" / "vehicles.json"
    VEHICLE_CACHE_TTL: float = 3600.0

    # Comma separated
    CORS_ORIGINS: str = "http://localhost:3000"

    RATE_LIMIT_WINDOW_SECONDS: int = 3600
    RATE_LIMIT_MAX: int = 10

    LOG_DIR: Path = Path("logs")
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"

    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"

    @property
    def mail_recipient(self) -> str:
        return self.EMAIL_TO or self.EMAIL_USER

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def verification_required(self) -> bool:
        """Tokens are always required in production."""
        return self.RECAPTCHA_REQUIRED or self.is_production()

    @property
    def test_token_allowed(self) -> bool:
        return not self.is_production() or self.RECAPTCHA_ALLOW_TEST_TOKEN


settings = Settings()


@lru_cache
def get_settings() -> Settings:
    return settings
