"""Application configuration with environment-based settings."""
import os
from typing import List, Optional
from dotenv import load_dotenv


def _env_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name, default)
    return [part.strip().lower() for part in raw.split(",") if part.strip()]


class Config:
    """Base configuration class following Single Responsibility Principle."""

    # Load environment variables
    load_dotenv()

    # Payment providers (comma separated: pagafacil, cazapagos, mock)
    PAYMENT_PROVIDERS: List[str] = _env_list("PAYMENT_PROVIDERS", "mock")

    # Order storage
    ORDER_STORAGE_TYPE: str = os.getenv("ORDER_STORAGE_TYPE", "memory")

    # PagaFacil
    PAGAFACIL_BASE_URL: Optional[str] = os.getenv("PAGAFACIL_BASE_URL")
    PAGAFACIL_API_KEY: Optional[str] = os.getenv("PAGAFACIL_API_KEY")
    PAGAFACIL_TIMEOUT_SECONDS: float = float(os.getenv("PAGAFACIL_TIMEOUT_SECONDS", "30"))

    # CazaPagos
    CAZAPAGOS_BASE_URL: Optional[str] = os.getenv("CAZAPAGOS_BASE_URL")
    CAZAPAGOS_API_KEY: Optional[str] = os.getenv("CAZAPAGOS_API_KEY")
    CAZAPAGOS_TIMEOUT_SECONDS: float = float(os.getenv("CAZAPAGOS_TIMEOUT_SECONDS", "30"))

    # In-process mock provider
    MOCK_PROVIDER_FAILURE_RATE: float = float(os.getenv("MOCK_PROVIDER_FAILURE_RATE", "0.0"))

    # Rate Limiting
    RATELIMIT_STORAGE_URL: str = os.getenv("RATELIMIT_STORAGE_URL", "memory://")
    RATELIMIT_ENABLED: bool = os.getenv("RATELIMIT_ENABLED", "true").lower() == "true"
    RATELIMIT_DEFAULT: str = os.getenv("RATELIMIT_DEFAULT", "1000 per hour;100 per minute")

    # Monitoring
    SENTRY_DSN: Optional[str] = os.getenv("SENTRY_DSN")
    ENABLE_METRICS: bool = os.getenv("ENABLE_METRICS", "true").lower() == "true"

    # Application
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev-secret-key-change-in-production")

    @classmethod
    def validate(cls) -> None:
        """Validate that every configured HTTP provider has its credentials."""
        required_vars = []
        if "pagafacil" in cls.PAYMENT_PROVIDERS:
            required_vars += [
                ("PAGAFACIL_BASE_URL", cls.PAGAFACIL_BASE_URL),
                ("PAGAFACIL_API_KEY", cls.PAGAFACIL_API_KEY),
            ]
        if "cazapagos" in cls.PAYMENT_PROVIDERS:
            required_vars += [
                ("CAZAPAGOS_BASE_URL", cls.CAZAPAGOS_BASE_URL),
                ("CAZAPAGOS_API_KEY", cls.CAZAPAGOS_API_KEY),
            ]

        missing = [name for name, value in required_vars if not value]
        if missing:
            raise ValueError(f"Missing required environment variables: {', '.join(missing)}")

        if not 0.0 <= cls.MOCK_PROVIDER_FAILURE_RATE <= 1.0:
            raise ValueError("MOCK_PROVIDER_FAILURE_RATE must be between 0 and 1")


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    PAYMENT_PROVIDERS = ["mock"]
    ORDER_STORAGE_TYPE = "memory"
    MOCK_PROVIDER_FAILURE_RATE = 0.0
    RATELIMIT_ENABLED = False
    RATELIMIT_STORAGE_URL = "memory://"
    ENABLE_METRICS = False
    SENTRY_DSN = None


def get_config() -> type[Config]:
    """Factory method to get configuration based on environment."""
    env = os.getenv("FLASK_ENV", "development").lower()

    config_map = {
        "development": DevelopmentConfig,
        "production": ProductionConfig,
        "testing": TestingConfig,
    }

    return config_map.get(env, DevelopmentConfig)
