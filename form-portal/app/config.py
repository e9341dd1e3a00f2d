from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings

BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    service_base_url: str = "https://dynamic-form-generator-9rl7.onrender.com"
    request_timeout: float = 15.0
    transition_delay: float = 0.3

    activity_dir: Path = BASE_DIR / "data" / "activity"

    model_config = {
        "env_prefix": "FORM_PORTAL_",
        "env_file": BASE_DIR.parent / ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @field_validator("service_base_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    return Settings()
