from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    DATABASE_URL: str
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Redis settings
    REDIS_URL: str = "redis://localhost:6379/0"
    PLACE_STATS_CACHE_TTL: int = 600

    # Ordering engine: spacing between freshly appended items
    ORDER_GAP: float = 1000.0

    # Place dedup window in degrees (~111m at the equator)
    PLACE_PROXIMITY_DEGREES: float = 0.001

    PROJECT_NAME: str = "Tripboard API"
    PROJECT_VERSION: str = "1.0.0"
    PROJECT_DESCRIPTION: str = "Collaborative trip planning API"

    CORS_ORIGIN_REGEX: str = r"^(http:\/\/localhost(:\d{1,5})?|http:\/\/127\.0\.0\.1(:\d{1,5})?)$"

    PASSWORD_MIN_LENGTH: int = 8

    LOG_LEVEL: str = "INFO"
    SQL_ECHO: bool = False

    class Config:
        env_file = ".env"


settings = Settings()
