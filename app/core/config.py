from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    PROJECT_NAME: str = "Recipe API"
    ENVIRONMENT: str = "development"

    # Token signing
    SECRET_KEY: str = "your-super-secret-key"  # Default for dev, override in prod
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Password hashing cost factor
    BCRYPT_ROUNDS: int = 10

    # Database
    DATABASE_URL: str = "sqlite:///./recipes.db"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # CORS
    # Set as a JSON list in the environment, e.g. CORS_ORIGINS='["http://localhost:5173"]'
    CORS_ORIGINS: List[str] = ["*"]

    LOGGING_CONFIG: str = "logging.ini"

    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env")


settings = Settings()
