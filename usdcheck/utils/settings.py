# Runtime settings for usdcheck
#
# Sources, lowest to highest priority:
#   1) built-in defaults
#   2) the first JSON config file found:
#        $XDG_CONFIG_HOME/usdcheck/config.json (default ~/.config)
#        %APPDATA%/usdcheck/config.json (Windows)
#        ~/.usdcheck/config.json (fallback)
#   3) environment variables:
#        USDCHECK_LOG_LEVEL  (DEBUG, INFO, WARNING, ERROR)
#        USDCHECK_SHOW_INTRO (truthy: "1", "true", "yes", "on")

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

PACKAGE_LOGGER = "usdcheck"
VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class Settings:
    log_level: str = "WARNING"
    show_intro: bool = False


def _truthy(val: Any) -> bool:
    if isinstance(val, bool):
        return val
    if val is None:
        return False
    s = str(val).strip().lower()
    return s in {"1", "true", "yes", "on"}


def _normalize_level(val: Any, default: str) -> str:
    level = str(val or "").strip().upper()
    if level in VALID_LOG_LEVELS:
        return level
    if level:
        logger.warning(f"Ignoring unknown log level: {val}")
    return default


def config_paths() -> List[str]:
    paths: List[str] = []
    home = os.path.expanduser("~")
    # Linux (XDG)
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME") or os.path.join(home, ".config")
    paths.append(os.path.join(xdg_config_home, "usdcheck", "config.json"))
    # Windows
    appdata = os.environ.get("APPDATA")
    if appdata:
        paths.append(os.path.join(appdata, "usdcheck", "config.json"))
    # Fallback
    paths.append(os.path.join(home, ".usdcheck", "config.json"))
    return paths


def _load_config_file() -> Dict[str, Any]:
    for path in config_paths():
        if not os.path.isfile(path):
            continue
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as ex:
            logger.warning(f"Failed reading config file {path}: {ex}")
            continue
        if isinstance(data, dict):
            logger.debug(f"Loaded settings from {path}")
            return data
        logger.warning(f"Ignoring config file {path}: top-level value must be an object")
    return {}


def load_settings(environ: Optional[Dict[str, str]] = None) -> Settings:
    """Resolve settings from defaults, the config file, then the environment."""
    env = os.environ if environ is None else environ
    defaults = Settings()
    data = _load_config_file()

    log_level = _normalize_level(data.get("log_level"), defaults.log_level)
    show_intro = _truthy(data.get("show_intro", defaults.show_intro))

    if env.get("USDCHECK_LOG_LEVEL"):
        log_level = _normalize_level(env["USDCHECK_LOG_LEVEL"], log_level)
    if "USDCHECK_SHOW_INTRO" in env:
        show_intro = _truthy(env["USDCHECK_SHOW_INTRO"])

    return Settings(log_level=log_level, show_intro=show_intro)


def configure_logging(level: str) -> None:
    """Apply `level` to the package logger."""
    logging.getLogger(PACKAGE_LOGGER).setLevel(_normalize_level(level, "WARNING"))
