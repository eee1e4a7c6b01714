from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    # API Settings
    PROJECT_NAME: str = "Gestion API"
    API_V1_STR: str = "/api/v1"
    PROJECT_VERSION: str = "0.1.0"
    DESCRIPTION: str = "Ledger bookkeeping for Deep Blue and Galakiwi"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # MongoDB
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DB: str = "gestion"
    # Transactions need a replica set; set USE_TRANSACTIONS=False for a standalone server
    USE_TRANSACTIONS: bool = True

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Logging
    LOG_LEVEL: str = "INFO"

    # Billing rules
    SURCHARGE_RATE: float = 0.10
    CARRY_FORWARD_SUFFIX: str = " - Saldo Pendiente"
    CLOSING_PAYMENT_NOTE: str = "Pago de cierre"

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env"
    )

settings = Settings()
