"""Environment-driven settings shared by the CLI and the HTTP API."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Tuple

DATA_DIR_ENV = "SPENDLITE_DATA_DIR"
ENV_NAME_ENV = "SPENDLITE_ENV"
ALLOWED_ORIGINS_ENV = "SPENDLITE_ALLOWED_ORIGINS"
LOG_LEVEL_ENV = "SPENDLITE_LOG_LEVEL"

DEVELOPMENT_ENVS = {"dev", "development"}


@dataclass(frozen=True)
class Settings:
    data_dir: Path = Path("data")
    env_name: str = "prod"
    allowed_origins: Tuple[str, ...] = ()
    log_level: Optional[str] = None

    @property
    def is_development(self) -> bool:
        return self.env_name in DEVELOPMENT_ENVS

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        origins = env.get(ALLOWED_ORIGINS_ENV, "")
        return cls(
            data_dir=Path(env.get(DATA_DIR_ENV) or "data"),
            env_name=(env.get(ENV_NAME_ENV) or "prod").strip().lower(),
            allowed_origins=tuple(origin.strip() for origin in origins.split(",") if origin.strip()),
            log_level=env.get(LOG_LEVEL_ENV) or None,
        )
