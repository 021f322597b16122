"""Runtime configuration read from the environment."""

from __future__ import annotations

import os

from pydantic import BaseModel

from dirscope.native.format import LIBRARY_ENV_VAR

LOG_LEVEL_ENV_VAR = "DIRSCOPE_LOG_LEVEL"
LOG_JSON_ENV_VAR = "DIRSCOPE_LOG_JSON"


class DirscopeConfig(BaseModel):
    """Settings for locating libgetdata and for logging."""

    library_path: str | None = None
    log_level: str = "WARNING"
    log_json: bool = False

    @classmethod
    def from_env(cls) -> DirscopeConfig:
        return cls(
            library_path=os.getenv(LIBRARY_ENV_VAR) or None,
            log_level=os.getenv(LOG_LEVEL_ENV_VAR, "WARNING"),
            log_json=os.getenv(LOG_JSON_ENV_VAR, "").strip().lower() in ("1", "true", "yes", "on"),
        )
