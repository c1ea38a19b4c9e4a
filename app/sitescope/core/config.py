from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env")

    APP_NAME: str = "SITESCOPE"
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    DATABASE_URL: str = "sqlite+pysqlite:///./sitescope.db"
    ENABLE_SITE_PARTNERS_FALLBACK: bool = False
    ANALYTICS_MAX_DATE_RANGE_DAYS: int = 365
    LIST_MAX_PAGE_SIZE: int = 200
    METRICS_ENABLED: bool = True
    LOG_LEVEL: str = "INFO"


settings = Settings()
