"""Tests for config_loader module.

- AAA pattern (Arrange-Act-Assert)
- Descriptive test names: test_unit_scenario_expectedBehavior
- Test isolation (no shared mutable state)
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from analytics_chat.core.config_loader import (
    _coerce_type,
    get_project_root,
    load_chat_config,
    load_logging_config,
    load_ui_config,
)


class TestConfigLoaderChat:
    """Test suite for chat backend configuration loading."""

    def test_load_chat_config_loads_from_yaml_file(self, tmp_path):
        # Arrange
        config_file = tmp_path / "chat.yaml"
        config_file.write_text(
            yaml.dump({"api_base_url": "http://analytics:9000", "request_timeout_s": 12.5, "history_window": 3})
        )

        # Act
        with patch.dict(os.environ, {}, clear=True):
            config = load_chat_config(config_path=config_file)

        # Assert
        assert config == {"api_base_url": "http://analytics:9000", "request_timeout_s": 12.5, "history_window": 3}

    def test_load_chat_config_missing_file_uses_defaults(self, tmp_path):
        # Act
        with patch.dict(os.environ, {}, clear=True):
            config = load_chat_config(config_path=tmp_path / "missing.yaml")

        # Assert
        assert config["api_base_url"] == "http://localhost:8000"
        assert config["request_timeout_s"] == 30.0
        assert config["history_window"] == 5

    def test_load_chat_config_env_var_overrides_yaml(self, tmp_path):
        # Arrange
        config_file = tmp_path / "chat.yaml"
        config_file.write_text(yaml.dump({"api_base_url": "http://from-yaml:1", "request_timeout_s": 10.0}))
        env = {"ANALYTICS_API_BASE_URL": "http://from-env:2", "ANALYTICS_REQUEST_TIMEOUT_S": "45"}

        # Act
        with patch.dict(os.environ, env, clear=True):
            config = load_chat_config(config_path=config_file)

        # Assert
        assert config["api_base_url"] == "http://from-env:2"
        assert config["request_timeout_s"] == 45.0
        assert isinstance(config["request_timeout_s"], float)

    def test_load_chat_config_coerces_yaml_strings(self, tmp_path):
        # Arrange
        config_file = tmp_path / "chat.yaml"
        config_file.write_text(yaml.dump({"request_timeout_s": "20", "history_window": "7.0"}))

        # Act
        with patch.dict(os.environ, {}, clear=True):
            config = load_chat_config(config_path=config_file)

        # Assert
        assert config["request_timeout_s"] == 20.0
        assert config["history_window"] == 7

    def test_load_chat_config_bad_value_keeps_default(self, tmp_path):
        # Arrange
        config_file = tmp_path / "chat.yaml"
        config_file.write_text(yaml.dump({"history_window": "lots"}))

        # Act
        with patch.dict(os.environ, {"ANALYTICS_REQUEST_TIMEOUT_S": "soon"}, clear=True):
            config = load_chat_config(config_path=config_file)

        # Assert
        assert config["history_window"] == 5
        assert config["request_timeout_s"] == 30.0

    def test_load_chat_config_invalid_yaml_raises_valueerror(self, tmp_path):
        # Arrange
        config_file = tmp_path / "chat.yaml"
        config_file.write_text("api_base_url: [unclosed")

        # Act & Assert
        with pytest.raises(ValueError, match="Invalid YAML"):
            load_chat_config(config_path=config_file)

    def test_load_chat_config_ignores_unknown_keys(self, tmp_path):
        config_file = tmp_path / "chat.yaml"
        config_file.write_text(yaml.dump({"unknown_key": 1}))
        with patch.dict(os.environ, {}, clear=True):
            assert "unknown_key" not in load_chat_config(config_path=config_file)


class TestConfigLoaderUI:
    """Test suite for UI configuration loading."""

    def test_load_ui_config_bool_env_override(self, tmp_path):
        # Arrange
        config_file = tmp_path / "ui.yaml"
        config_file.write_text(yaml.dump({"app_title": "Spend Explorer", "show_raw_response": False}))

        # Act
        with patch.dict(os.environ, {"SHOW_RAW_RESPONSE": "true"}, clear=True):
            config = load_ui_config(config_path=config_file)

        # Assert
        assert config["app_title"] == "Spend Explorer"
        assert config["show_raw_response"] is True
        assert config["log_level"] == "INFO"


class TestConfigLoaderLogging:
    """Test suite for logging configuration loading."""

    def test_load_logging_config_merges_module_levels(self, tmp_path):
        # Arrange
        config_file = tmp_path / "logging.yaml"
        config_file.write_text(
            yaml.dump({"root_level": "DEBUG", "module_levels": {"analytics_chat.core.chart_planner": "DEBUG"}})
        )

        # Act
        config = load_logging_config(config_path=config_file)

        # Assert
        assert config["root_level"] == "DEBUG"
        assert config["module_levels"]["analytics_chat.core.chart_planner"] == "DEBUG"
        assert config["module_levels"]["analytics_chat.core"] == "INFO"
        assert config["reduce_noise"]["urllib3"] == "WARNING"

    def test_load_logging_config_defaults_are_not_shared_between_calls(self, tmp_path):
        # Arrange
        first = load_logging_config(config_path=tmp_path / "missing.yaml")

        # Act
        first["module_levels"]["mutated"] = "DEBUG"
        second = load_logging_config(config_path=tmp_path / "missing.yaml")

        # Assert
        assert "mutated" not in second["module_levels"]


class TestConfigLoaderHelpers:
    """Test suite for helpers."""

    @pytest.mark.parametrize(
        ("value", "target_type", "expected"),
        [("30.0", float, 30.0), ("TRUE", bool, True), ("no", bool, False), ("30.0", int, 30), (5, str, "5")],
    )
    def test_coerce_type_converts_strings(self, value, target_type, expected):
        assert _coerce_type(value, target_type) == expected

    def test_get_project_root_contains_config_directory(self):
        root = get_project_root()
        assert isinstance(root, Path)
        assert (root / "config" / "chat.yaml").exists()
