"""Tests for configuration loading and validation."""

import os
from unittest.mock import patch

import pytest

from resume_critic.config import (
    DEFAULT_MODEL,
    DEFAULT_ROLES,
    Severity,
    has_errors,
    load_config,
    resolve_api_key,
    validate_config,
)


class TestValidateConfig:
    """Tests for validate_config()."""

    def _valid_config(self) -> dict:
        return {
            "api_key": "test-key-123",
            "model": "gemini-2.5-flash",
            "request_timeout": 30,
            "max_image_dimension": 1500,
            "jpeg_quality": 80,
            "roles": ["Software Engineer"],
        }

    def test_valid_config_no_issues(self):
        assert validate_config(self._valid_config()) == []

    def test_missing_api_key(self):
        config = self._valid_config()
        config["api_key"] = ""
        issues = validate_config(config)
        assert has_errors(issues)
        assert [i.field for i in issues] == ["api_key"]

    @patch.dict(os.environ, {"GEMINI_API_KEY": "env-key"})
    def test_env_var_satisfies_missing_key(self):
        config = self._valid_config()
        config["api_key"] = ""
        assert not has_errors(validate_config(config))

    @pytest.mark.parametrize(
        "field,value",
        [
            ("model", ""),
            ("request_timeout", 0),
            ("request_timeout", "60"),
            ("max_image_dimension", -5),
            ("max_image_dimension", 1500.5),
            ("jpeg_quality", 0),
            ("jpeg_quality", 100),
            ("roles", "Software Engineer"),
            ("roles", ["Software Engineer", ""]),
        ],
    )
    def test_invalid_values_are_errors(self, field, value):
        config = self._valid_config()
        config[field] = value
        issues = validate_config(config)
        errors = [i for i in issues if i.field == field]
        assert len(errors) == 1
        assert errors[0].severity == Severity.ERROR

    def test_empty_roles_is_warning(self):
        config = self._valid_config()
        config["roles"] = []
        issues = validate_config(config)
        assert not has_errors(issues)
        assert issues[0].severity == Severity.WARNING


class TestResolveApiKey:
    @patch.dict(os.environ, {"RESUME_CRITIC_TEST_KEY": "from-placeholder"})
    def test_placeholder_is_expanded(self):
        assert resolve_api_key("${RESUME_CRITIC_TEST_KEY}") == "from-placeholder"

    def test_unresolved_placeholder_is_empty(self):
        assert resolve_api_key("${RESUME_CRITIC_TEST_KEY}") == ""

    @patch.dict(os.environ, {"GEMINI_API_KEY": "env-key"})
    def test_env_var_takes_priority(self):
        assert resolve_api_key("config-key") == "env-key"

    def test_literal_key(self):
        assert resolve_api_key("config-key") == "config-key"


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(str(tmp_path / "nope.yaml"))
        assert config.api_key == ""
        assert config.model == DEFAULT_MODEL
        assert config.max_image_dimension == 1500
        assert config.jpeg_quality == 80
        assert config.roles == DEFAULT_ROLES

    def test_yaml_values_are_loaded(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "api_key: abc\nmodel: gemini-2.0-flash\nrequest_timeout: 15\nroles:\n  - Data Scientist\n",
            encoding="utf-8",
        )
        config = load_config(str(path))
        assert config.api_key == "abc"
        assert config.model == "gemini-2.0-flash"
        assert config.request_timeout == 15
        assert config.roles == ["Data Scientist"]

    def test_non_mapping_yaml_is_rejected(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")
        with pytest.raises(ValueError):
            load_config(str(path))
