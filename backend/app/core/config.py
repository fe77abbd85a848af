from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_NAME: str = "Vials API"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # PostgreSQL
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "vials"
    POSTGRES_PASSWORD: str = "vials_secret"
    POSTGRES_DB: str = "vials"
    DATABASE_URL: str = ""  # Full URL override (e.g. Render / tests)

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    # Redis
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    NFT_CACHE_TTL_SEC: int = 60  # 0 disables the ownership cache

    @property
    def redis_url(self) -> str:
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    # NFT indexers
    ALCHEMY_API_KEY: str = ""
    ENVIO_API_KEY: str = ""
    ENVIO_HYPERSYNC_URL: str = "https://monad-testnet.hypersync.xyz/query"

    # IPFS pinning
    PINATA_JWT: str = ""
    PINATA_API_URL: str = "https://api.pinata.cloud"
    PINATA_GATEWAY: str = "https://gateway.pinata.cloud/ipfs"

    # Serve placeholder data when an indexer / pinning call fails.
    # Off by default: production responses must not contain mock NFTs.
    MOCK_FALLBACK_ENABLED: bool = False

    # Outbound HTTP
    HTTP_TIMEOUT_SEC: float = 15.0
    HTTP_MAX_RETRIES: int = 2
    HTTP_RETRY_BASE_DELAY_SEC: float = 0.5
    ALCHEMY_RATE_LIMIT: int = 5  # Requests per second
    ENVIO_RATE_LIMIT: int = 2  # Requests per second

    # AI generation stub
    GENERATION_MIN_DELAY_SEC: float = 2.0
    GENERATION_MAX_DELAY_SEC: float = 5.0

    CORS_ORIGINS: list[str] = ["*"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
