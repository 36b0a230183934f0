"""Runtime settings read from the environment.

A ``.env`` file found from the working directory upwards is loaded
first, without overriding variables that are already set.
"""

import os
from functools import lru_cache

from dotenv import find_dotenv, load_dotenv

_env_path = find_dotenv(usecwd=True)
if _env_path:
    load_dotenv(_env_path)


class Settings:

    def __init__(self) -> None:
        self.MONGODB_URI: str = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
        self.DB_NAME: str = os.getenv("DB_NAME", "stockroom")
        self.MONGO_TIMEOUT_MS: int = int(os.getenv("MONGO_TIMEOUT_MS", "5000"))
        # Upper bound on generated variant combinations per product
        self.MAX_VARIANT_COMBINATIONS: int = int(os.getenv("MAX_VARIANT_COMBINATIONS", "500"))
        self.DEFAULT_CURRENCY: str = os.getenv("DEFAULT_CURRENCY", "AED").upper()
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
        self.ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development").lower()

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    return Settings()
