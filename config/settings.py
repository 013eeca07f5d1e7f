from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Backend actor bridge (order/chunk queries and mutations)
    ACTOR_URL: str = "http://localhost:4943/api/v2/actor"
    # Ledger bridge (ckUSDC balance queries)
    LEDGER_URL: str = "http://localhost:4943/api/v2/ledger"
    # Caller principal used for the default-wallet balance shape
    CALLER_PRINCIPAL: str = ""
    HTTP_TIMEOUT_SECONDS: float = 10.0

    # Fees: percentages, must match the backend config
    ACTIVATION_FEE_PERCENT: Decimal = Decimal("2.5")  # to treasury, non-refundable
    FILLER_INCENTIVE_PERCENT: Decimal = Decimal("4.5")  # reserved for fillers
    CKUSDC_TRANSFER_FEE_USD: Decimal = Decimal("0.01")

    # Order sizing
    MIN_CHUNK_SIZE_USD: Decimal = Decimal("3")
    MAX_CHUNKS_ALLOWED: int = 30
    BSV_PRICE_BUFFER_PERCENT: Decimal = Decimal("5")

    # App
    APP_NAME: str = "EasySwap Order Client"
    DEBUG: bool = False


settings = Settings()
