from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///app.db"
    JWT_SECRET: str = Field("dev-secret-key", description="JWT secret key")
    JWT_ALGORITHM: str = "HS256"
    TOKEN_TTL_HOURS: int = 24
    PASSWORD_MIN_LENGTH: int = 6
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    model_config = SettingsConfigDict(env_file=".env")


settings = Settings()
