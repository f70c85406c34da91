"""Runtime settings from the environment (.env supported) and logging setup."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from minicrm.application.ports import ContactRepository
from minicrm.infrastructure.factory import (
    STORAGE_JSON,
    STORAGE_MEMORY,
    STORAGE_SQLITE,
    canonical_type,
    create_repository,
)

# Repo root: from src/minicrm/config.py go up three levels.
_REPO_ROOT = Path(__file__).resolve().parent.parent.parent

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_DEFAULT_PATHS = {
    STORAGE_MEMORY: "",
    STORAGE_JSON: "contacts.json",
    STORAGE_SQLITE: "contacts.db",
}


@dataclass(frozen=True)
class Settings:
    storage_type: str = STORAGE_MEMORY
    storage_path: str = ""
    log_level: str = "INFO"


def load_settings(env_file: str | Path | None = None) -> Settings:
    """Read MINICRM_* variables, loading a .env file first when one exists.

    Values already in the environment win over the .env file.
    """
    if env_file is not None:
        load_dotenv(env_file)
    else:
        for path in (_REPO_ROOT / ".env", Path.cwd() / ".env"):
            if path.exists():
                load_dotenv(path)
                break

    storage_type = canonical_type(
        (os.environ.get("MINICRM_STORAGE_TYPE") or STORAGE_MEMORY).strip().lower()
    )
    storage_path = (os.environ.get("MINICRM_STORAGE_PATH") or "").strip()
    if not storage_path:
        storage_path = _DEFAULT_PATHS[storage_type]
    log_level = (os.environ.get("MINICRM_LOG_LEVEL") or "INFO").strip().upper()
    return Settings(storage_type=storage_type, storage_path=storage_path, log_level=log_level)


def open_repository(settings: Settings) -> ContactRepository:
    return create_repository(settings.storage_type, settings.storage_path)


def configure_logging(level: str | int = "INFO") -> None:
    logging.basicConfig(format=LOG_FORMAT, level=level)
