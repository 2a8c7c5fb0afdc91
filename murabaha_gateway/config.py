"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./murabaha.db"

    # Service
    service_name: str = "murabaha-gateway"
    log_level: str = "INFO"

    # Documents
    bank_name: str = "Mizan Bank"
    currency_symbol: str = "$"

    # HTTP Client
    http_timeout_seconds: float = 10.0

    # Notary (signs and submits memo transactions); empty disables notarization
    notary_url: str = ""
    notary_max_retries: int = 3
    notary_backoff_base: float = 1.0  # Exponential backoff base in seconds

    # Stellar
    stellar_network: str = "TESTNET"
    horizon_url: str = "https://horizon-testnet.stellar.org"
    explorer_base_url: str = "https://stellar.expert/explorer/testnet"
    treasury_public_key: str = ""


settings = Settings()
