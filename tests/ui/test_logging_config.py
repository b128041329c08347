"""Tests for centralized logging configuration."""

import logging
from unittest.mock import patch

import yaml

from analytics_chat.ui.logging_config import configure_logging


class TestConfigureLogging:
    """Test suite for configure_logging."""

    def test_configure_logging_applies_yaml_levels(self, tmp_path):
        # Arrange
        config_file = tmp_path / "logging.yaml"
        config_file.write_text(
            yaml.dump({"module_levels": {"analytics_chat.test_module": "DEBUG"}, "reduce_noise": {"noisy": "ERROR"}})
        )
        root = logging.getLogger()

        # Act
        with patch.object(root, "handlers", []):
            configure_logging(config_path=config_file)

        # Assert
        assert logging.getLogger("analytics_chat.test_module").level == logging.DEBUG
        assert logging.getLogger("noisy").level == logging.ERROR

    def test_configure_logging_is_idempotent_when_handlers_exist(self, tmp_path):
        # Arrange
        config_file = tmp_path / "logging.yaml"
        config_file.write_text(yaml.dump({"module_levels": {"analytics_chat.untouched": "DEBUG"}}))
        root = logging.getLogger()

        # Act
        with patch.object(root, "handlers", [logging.NullHandler()]):
            configure_logging(config_path=config_file)

        # Assert
        assert logging.getLogger("analytics_chat.untouched").level == logging.NOTSET
