"""Settings read from the environment (and a local .env file)."""

import os
from functools import lru_cache
from typing import List, Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()


class Settings(BaseModel):
    database_url: Optional[str] = None
    db_pool_min: int = Field(2, ge=1)
    db_pool_max: int = Field(10, ge=1)
    cors_origins: List[str] = ["http://localhost:5173"]
    log_level: str = "INFO"
    log_format: Literal["text", "json"] = "text"
    google_maps_api_key: Optional[str] = None

    leaderboard_size: int = Field(5, ge=1)
    recent_rounds: int = Field(5, ge=1)
    history_rounds: int = Field(50, ge=1)

    @classmethod
    def from_env(cls) -> "Settings":
        values = {}
        for name in cls.model_fields:
            raw = os.environ.get(name.upper())
            if raw is None or raw == "":
                continue
            if name == "cors_origins":
                values[name] = [o.strip() for o in raw.split(",") if o.strip()]
            else:
                values[name] = raw
        return cls(**values)


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
