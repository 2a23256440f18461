from pydantic_settings import BaseSettings
from pydantic import ConfigDict


class Settings(BaseSettings):
    TMDB_API_KEY: str = ''
    TMDB_BASE_URL: str = 'https://api.themoviedb.org/3'
    TMDB_IMAGE_BASE_URL: str = 'https://image.tmdb.org/t/p/'
    TMDB_LANGUAGE: str = 'en-US'
    REDIS_URL: str = 'redis://localhost:6379/0'
    HTTP_TIMEOUT: float = 10.0
    LOG_LEVEL: str = 'INFO'

    model_config = ConfigDict(
        env_file=".env"
    )


settings = Settings()
