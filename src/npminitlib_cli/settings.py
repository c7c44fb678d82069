import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

import platformdirs
from dotenv import load_dotenv

from .catalog import DEFAULT_VERSION

APP_NAME = "npminitlib"


def default_env_file() -> Path:
    """Settings file looked up when ``--env-file`` is not given."""
    return platformdirs.user_config_path(APP_NAME) / ".env"


@dataclass(frozen=True)
class Settings:
    init_version: str = DEFAULT_VERSION
    github_token: str | None = None
    github_username: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            init_version=(env.get("INIT_VERSION") or "").strip() or DEFAULT_VERSION,
            github_token=(env.get("GITHUB_ACCESS_TOKEN") or "").strip() or None,
            github_username=(env.get("GITHUB_USERNAME") or "").strip() or None,
        )


def load_settings(env_file: Path | None = None) -> Settings:
    """Load the optional dotenv settings file, then read settings from the environment.

    Variables already set in the process environment take precedence over the file.
    A missing file is not an error.
    """
    path = env_file if env_file is not None else default_env_file()
    if path.is_file():
        load_dotenv(path, override=False)
    return Settings.from_env()
