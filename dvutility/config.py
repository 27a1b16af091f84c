# ==============================================
# Configuration Management
# ==============================================
#
# PURPOSE:
#   Load configuration from environment variables / .env file.
#   Provides typed config objects to the store, the CLI and
#   the logging setup.
#
# CLASSES:
# --------
# - StoreConfig (dataclass)
#     app_name: str               (default "dvutility")
#     durable_dir: str | None     (default None → platform user data dir)
#     cache_dir: str | None       (default None → platform user cache dir)
#     json_indent: int | None     (default None → compact JSON)
#
# - LoggingConfig (dataclass)
#     level: str                  (default "INFO")
#     log_file: str | None        (default None)
#
# - AppConfig (dataclass)
#     store: StoreConfig
#     logging: LoggingConfig
#
# FUNCTIONS:
# ----------
# - get_config() -> AppConfig
#     Load .env using python-dotenv, construct AppConfig.
#     Returns the same singleton on repeated calls.
#
# - reset_config() -> None
#     Forget the singleton (tests, long-running hosts re-reading env).
#
# - build_resolver(config) -> UserDirectoryResolver
#     Directory resolver honoring the configured overrides.
#
# USAGE:
# ------
#   from dvutility.config import get_config
#   config = get_config()
#   print(config.store.app_name)
#
# ==============================================

import os
from dataclasses import dataclass
from typing import Optional
from pathlib import Path

from dotenv import load_dotenv


@dataclass
class StoreConfig:
    """File store configuration."""
    app_name: str = "dvutility"
    durable_dir: Optional[str] = None
    cache_dir: Optional[str] = None
    json_indent: Optional[int] = None


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    log_file: Optional[str] = None


@dataclass
class AppConfig:
    """Main application configuration."""
    store: StoreConfig
    logging: LoggingConfig


# Singleton instance
_config_instance: Optional[AppConfig] = None


def _optional_int(value: Optional[str]) -> Optional[int]:
    if value is None or value.strip() == "":
        return None
    try:
        return int(value)
    except ValueError:
        return None


def get_config() -> AppConfig:
    """
    Load configuration from environment variables / .env file.
    Returns the same singleton instance on repeated calls.

    Returns:
        AppConfig: Application configuration
    """
    global _config_instance

    if _config_instance is not None:
        return _config_instance

    # Load .env file from project root
    env_path = Path(__file__).parent.parent / ".env"
    load_dotenv(dotenv_path=env_path)

    store_config = StoreConfig(
        app_name=os.getenv("DVUTILITY_APP_NAME", "dvutility"),
        durable_dir=os.getenv("DVUTILITY_DURABLE_DIR") or None,
        cache_dir=os.getenv("DVUTILITY_CACHE_DIR") or None,
        json_indent=_optional_int(os.getenv("DVUTILITY_JSON_INDENT")),
    )

    logging_config = LoggingConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        log_file=os.getenv("LOG_FILE_PATH") or None,
    )

    _config_instance = AppConfig(store=store_config, logging=logging_config)

    return _config_instance


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() re-reads env."""
    global _config_instance
    _config_instance = None


def build_resolver(config: Optional[AppConfig] = None):
    """
    Build the directory resolver described by the configuration.

    Args:
        config: Configuration to use, defaults to get_config()

    Returns:
        UserDirectoryResolver honoring durable/cache overrides
    """
    from .persistence.directories import UserDirectoryResolver

    config = config or get_config()
    return UserDirectoryResolver(
        app_name=config.store.app_name,
        durable_override=config.store.durable_dir,
        cache_override=config.store.cache_dir,
    )
