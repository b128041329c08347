"""
UI Configuration Module.

Settings for the analytics chat UI, loaded once from config/ui.yaml
(environment variables override YAML values).
"""

from analytics_chat.core.config_loader import load_ui_config

_ui_config = load_ui_config()

APP_TITLE: str = _ui_config["app_title"]
APP_SUBTITLE: str = _ui_config["app_subtitle"]

# Logging configuration
LOG_LEVEL: str = _ui_config["log_level"]

# Raw response viewer starts enabled when true (SHOW_RAW_RESPONSE=true)
SHOW_RAW_RESPONSE: bool = _ui_config["show_raw_response"]
