from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # DDM REST API on the OpenEdge PAS instance
    ddm_base_url: str = "http://sports2020-pas:8810/web/api/masking"
    ddm_timeout_seconds: float = 30.0

    log_level: str = "INFO"

    # CORS: comma-separated origins allowed to access the API
    cors_origins: str = "http://localhost:3000"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
