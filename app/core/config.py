from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "sqlite:///./shareit.db"
    DB_ECHO: bool = False

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    USER_ID_HEADER: str = "X-Sharer-User-Id"
    REQUESTS_PAGE_SIZE: int = 10


settings = Settings()
