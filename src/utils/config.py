"""
Configuration loaded from a ``config.txt`` of KEY=VALUE lines.

The file lives in the working directory unless LABELDESK_CONFIG points
elsewhere. A missing or incomplete file is replaced by a template and the
app refuses to start until the operator has checked the values.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from dotenv import dotenv_values

from core.errors import ConfigurationError
from utils.logger import get_logger

_logger = get_logger(__name__)

CONFIG_PATH_ENV = "LABELDESK_CONFIG"
DEFAULT_CONFIG_PATH = Path("config.txt")

REQUIRED_KEYS = (
    "SEARCH_API_URL",
    "DATA_FILE_PATH",
    "TEMPLATE_FILE_PATH",
    "LOGIN_API_URL",
    "LOCATIONS_API_URL",
)

CONFIG_TEMPLATE = """\
SEARCH_API_URL=https://api.example.com/api/products/basic-search
DATA_FILE_PATH=C:\\barcode\\labels.txt
TEMPLATE_FILE_PATH=C:\\barcode\\label_template.btw
LOGIN_API_URL=https://api.example.com/api/login
LOCATIONS_API_URL=https://api.example.com/api/locations
"""

DEFAULT_REQUEST_TIMEOUT = 30.0
DEFAULT_SESSION_DB_PATH = "data/session.sqlite"


@dataclass(frozen=True)
class AppConfig:
    search_api_url: str
    data_file_path: str
    template_file_path: str
    login_api_url: str
    locations_api_url: str
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    session_db_path: str = DEFAULT_SESSION_DB_PATH


def config_path() -> Path:
    return Path(os.getenv(CONFIG_PATH_ENV) or DEFAULT_CONFIG_PATH)


def _write_template(path: Path) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(CONFIG_TEMPLATE, encoding="utf-8")
    except OSError as e:
        _logger.error(f"Could not write config template to {path}: {e}")
        return
    _logger.info(f"Wrote config template to {path}")


def _parse_timeout(raw: Optional[str]) -> float:
    if not raw:
        return DEFAULT_REQUEST_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        raise ConfigurationError(f"REQUEST_TIMEOUT must be a number, got {raw!r}")
    if timeout <= 0:
        raise ConfigurationError("REQUEST_TIMEOUT must be positive")
    return timeout


def load_config(path: Optional[Path] = None) -> AppConfig:
    path = Path(path) if path is not None else config_path()

    values: Dict[str, Optional[str]] = {}
    if path.is_file():
        values = {
            k.strip(): (v or "").strip() for k, v in dotenv_values(path).items()
        }

    missing = [k for k in REQUIRED_KEYS if not values.get(k)]
    if missing:
        _logger.warning(f"Config {path} is missing {', '.join(missing)}")
        if not path.exists():
            _write_template(path)
        raise ConfigurationError(
            f"Configuration incomplete or file missing ({', '.join(missing)}). "
            f"Please verify the values in '{path}' and restart the application."
        )

    return AppConfig(
        search_api_url=values["SEARCH_API_URL"],
        data_file_path=values["DATA_FILE_PATH"],
        template_file_path=values["TEMPLATE_FILE_PATH"],
        login_api_url=values["LOGIN_API_URL"],
        locations_api_url=values["LOCATIONS_API_URL"],
        request_timeout=_parse_timeout(values.get("REQUEST_TIMEOUT")),
        session_db_path=values.get("SESSION_DB_PATH") or DEFAULT_SESSION_DB_PATH,
    )
