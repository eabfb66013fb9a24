"""
Environment-driven settings.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field


def _load_dotenv() -> None:
    cwd_env = Path.cwd() / ".env"
    if cwd_env.exists():
        load_dotenv(dotenv_path=cwd_env, override=True)


_load_dotenv()


class Settings(BaseModel):
    """
    Overrides read from environment variables.

    Attributes:
        esbuild_binary: Path to the esbuild executable, when it is not on PATH.
        log_level: Logging level that wins over the ``--log-level`` option.
    """
    esbuild_binary: Optional[str] = Field(default=None, alias="TAROTBUILD_ESBUILD")
    log_level: Optional[str] = Field(default=None, alias="TAROTBUILD_LOG_LEVEL")

    model_config = {
        "populate_by_name": True,
    }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Load settings from environment/.env exactly once.
    """
    values = {field.alias: os.getenv(field.alias) for field in Settings.model_fields.values()}
    return Settings(**values)
