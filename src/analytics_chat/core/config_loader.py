"""Centralized configuration loader for YAML-based configuration.

This module provides functions to load configuration from YAML files with:
- Environment variable overrides (env var → YAML → defaults)
- Type coercion (string to float, bool, int)
- Schema defaults using dataclasses
- Graceful degradation (missing files use defaults)
"""

import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import yaml  # type: ignore

logger = logging.getLogger(__name__)


def get_project_root() -> Path:
    """
    Get project root directory.

    Uses pattern: config_loader.py → core/ → analytics_chat/ → src/ → project_root

    Validates that the config/ directory exists to ensure correct project root detection.

    Returns:
        Path to project root directory

    Raises:
        ValueError: If config/ directory is not found at the detected project root
    """
    project_root = Path(__file__).parent.parent.parent.parent

    config_dir = project_root / "config"
    if not config_dir.is_dir():
        raise ValueError(
            f"Project root detection failed: config/ directory not found at {config_dir}. "
            f"Detected project root: {project_root}. "
            f"If project structure has changed, update get_project_root() in config_loader.py"
        )

    return project_root


def _coerce_type(value: Any, target_type: type) -> Any:
    """
    Coerce value to target type.

    Handles:
    - String "30.0" → float 30.0
    - String "true"/"false" → bool True/False (case-insensitive)
    - String "123" → int 123

    Args:
        value: Value to coerce
        target_type: Target type (float, bool, int, str)

    Returns:
        Coerced value

    Raises:
        ValueError: If coercion fails
    """
    if value is None:
        return None

    if isinstance(value, target_type):
        return value

    if target_type is bool:
        if isinstance(value, str):
            return value.lower() in ("true", "1", "yes", "on")
        return bool(value)

    if target_type is float:
        return float(value)

    if target_type is int:
        if isinstance(value, str):
            return int(float(value))  # Handle "30.0" → 30
        return int(value)

    if target_type is str:
        return str(value)

    return value


def _get_env_var(key: str, default: Any = None) -> str | None:
    """
    Get environment variable value.

    Args:
        key: Environment variable name
        default: Default value if not set

    Returns:
        Environment variable value or default
    """
    return os.getenv(key, default)


def _apply_env_overrides(config: dict[str, Any], env_mapping: dict[str, str]) -> dict[str, Any]:
    """
    Apply environment variable overrides to config.

    Args:
        config: Configuration dictionary
        env_mapping: Mapping of env var names to config keys

    Returns:
        Config with env var overrides applied
    """
    result = config.copy()

    for env_key, config_key in env_mapping.items():
        env_value = _get_env_var(env_key)
        if env_value is None or config_key not in result:
            continue
        target_type = type(result[config_key])
        try:
            result[config_key] = _coerce_type(env_value, target_type)
        except (ValueError, TypeError) as e:
            logger.warning(f"Failed to coerce env var {env_key}={env_value} to {target_type.__name__}: {e}")

    return result


def _merge_yaml(defaults: dict[str, Any], config_path: Path, merge_dicts: tuple[str, ...] = ()) -> dict[str, Any]:
    """
    Merge a YAML file over defaults, coercing scalars to the default's type.

    Raises:
        ValueError: If YAML is invalid
    """
    config = {key: (value.copy() if isinstance(value, dict) else value) for key, value in defaults.items()}
    if not config_path.exists():
        logger.debug(f"Config file not found at {config_path}, using defaults")
        return config

    try:
        with open(config_path) as f:
            yaml_data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {config_path}: {e}") from e
    except OSError as e:
        logger.warning(f"Failed to load config from {config_path}: {e}, using defaults")
        return config

    for key, value in yaml_data.items():
        if key not in defaults:
            continue
        if key in merge_dicts:
            if isinstance(value, dict):
                config[key].update(value)
            continue
        target_type = type(defaults[key])
        try:
            config[key] = _coerce_type(value, target_type)
        except (ValueError, TypeError) as e:
            logger.warning(f"Failed to coerce YAML value {key}={value} to {target_type.__name__}: {e}, using default")

    return config


def _default_path(filename: str) -> Path:
    return get_project_root() / "config" / filename


@dataclass
class ChatConfigDefaults:
    """Default values for chat backend configuration."""

    api_base_url: str = "http://localhost:8000"
    request_timeout_s: float = 30.0
    history_window: int = 5


def load_chat_config(config_path: Path | None = None) -> dict[str, Any]:
    """
    Load chat backend config from YAML with env var overrides.

    Precedence: Environment variable → YAML value → Default value

    Args:
        config_path: Optional path to config file. If None, uses config/chat.yaml.

    Returns:
        dict with keys:
        - api_base_url: str
        - request_timeout_s: float
        - history_window: int

    Raises:
        ValueError: If YAML is invalid
    """
    config = _merge_yaml(asdict(ChatConfigDefaults()), config_path or _default_path("chat.yaml"))

    env_mapping = {
        "ANALYTICS_API_BASE_URL": "api_base_url",
        "ANALYTICS_REQUEST_TIMEOUT_S": "request_timeout_s",
        "ANALYTICS_HISTORY_WINDOW": "history_window",
    }
    return _apply_env_overrides(config, env_mapping)


@dataclass
class UIConfigDefaults:
    """Default values for UI configuration."""

    app_title: str = "Procurement Analytics"
    app_subtitle: str = "Ask questions about line-item purchase orders"
    log_level: str = "INFO"
    show_raw_response: bool = False


def load_ui_config(config_path: Path | None = None) -> dict[str, Any]:
    """
    Load UI config from YAML with env var overrides.

    Precedence: Environment variable → YAML value → Default value

    Args:
        config_path: Optional path to config file. If None, uses config/ui.yaml.

    Returns:
        dict with keys:
        - app_title: str
        - app_subtitle: str
        - log_level: str
        - show_raw_response: bool

    Raises:
        ValueError: If YAML is invalid
    """
    config = _merge_yaml(asdict(UIConfigDefaults()), config_path or _default_path("ui.yaml"))

    env_mapping = {
        "APP_TITLE": "app_title",
        "LOG_LEVEL": "log_level",
        "SHOW_RAW_RESPONSE": "show_raw_response",
    }
    return _apply_env_overrides(config, env_mapping)


@dataclass
class LoggingConfigDefaults:
    """Default values for logging configuration."""

    root_level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    module_levels: dict[str, str] = field(
        default_factory=lambda: {
            "analytics_chat.core": "INFO",
            "analytics_chat.ui": "INFO",
        }
    )
    reduce_noise: dict[str, str] = field(
        default_factory=lambda: {
            "streamlit": "WARNING",
            "urllib3": "WARNING",
            "matplotlib": "WARNING",
        }
    )


def load_logging_config(config_path: Path | None = None) -> dict[str, Any]:
    """
    Load logging config from YAML.

    Args:
        config_path: Optional path to config file. If None, uses config/logging.yaml.

    Returns:
        dict with keys:
        - root_level: str
        - format: str
        - module_levels: dict[str, str]
        - reduce_noise: dict[str, str]

    Raises:
        ValueError: If YAML is invalid
    """
    return _merge_yaml(
        asdict(LoggingConfigDefaults()),
        config_path or _default_path("logging.yaml"),
        merge_dicts=("module_levels", "reduce_noise"),
    )
