from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App settings
    PROJECT_NAME: str = "DriftAI"
    API_PREFIX: str = "/api"
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")
    FRONTEND_URL: str = Field(default="http://localhost:3000")
    RATE_LIMIT_DEFAULT: str = Field(default="100/15minutes")

    # DynamoDB
    DYNAMO_REGION: str = Field(default="eu-north-1")
    DYNAMO_USERS_TABLE: str = Field(default="driftai-users", validation_alias="DYNAMO_TABLE_USERS")
    DYNAMO_ANALYSES_TABLE: str = Field(default="driftai-analyses", validation_alias="DYNAMO_TABLE_ANALYSES")

    # JWT Authentication
    JWT_SECRET_KEY: str = Field(default="change-me-in-production", validation_alias="JWT_SECRET")
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days

    # Tripletex
    TRIPLETEX_BASE_URL: str = Field(default="https://api.tripletex.no/v2")
    TRIPLETEX_PAGE_SIZE: int = Field(default=1000)
    TRIPLETEX_TIMEOUT_SECONDS: float = Field(default=30.0)
    TRIPLETEX_FETCH_DAYS: int = Field(default=90)

    # OpenAI
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4"
    OPENAI_MAX_TOKENS: int = 300
    OPENAI_TEMPERATURE: float = 0.7

    # Analysis
    STARTING_BALANCE: float = Field(default=250_000)
    HISTORY_MONTHS: int = Field(default=3)
    MONTH_LABEL_LOCALE: str = Field(default="nb_NO")

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )


settings = Settings()
