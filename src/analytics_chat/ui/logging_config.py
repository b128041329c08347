"""
Centralized logging configuration for Streamlit UI.

Configure once in app.py entry point, not per page.
"""

import logging
import sys
from pathlib import Path

from analytics_chat.core.config_loader import load_logging_config


def configure_logging(level: int | str | None = None, config_path: Path | None = None) -> None:
    """
    Configure Python logging for the entire application.

    Truly idempotent: safe to call multiple times without side effects.
    Checks if root logger already has handlers before configuring.
    No force=True to avoid Streamlit handler issues.

    Args:
        level: Optional root level overriding config/logging.yaml
        config_path: Optional logging YAML path (default: config/logging.yaml)
    """
    root_logger = logging.getLogger()

    # Only configure if no handlers exist (truly idempotent)
    if root_logger.handlers:
        return

    config = load_logging_config(config_path)

    logging.basicConfig(
        level=level if level is not None else config["root_level"],
        format=config["format"],
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    for name, module_level in config["module_levels"].items():
        logging.getLogger(name).setLevel(module_level)

    # Reduce noise
    for name, noisy_level in config["reduce_noise"].items():
        logging.getLogger(name).setLevel(noisy_level)
