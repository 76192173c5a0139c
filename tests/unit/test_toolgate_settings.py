# Copyright 2025 Vijaykumar Singh <singhvjd@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Tests for ToolGateSettings."""

import pytest

from toolgate.config.settings import ToolGateSettings, load_settings
from toolgate.core.errors import ConfigurationError


class TestToolGateSettings:
    """Tests for settings defaults and sources."""

    def test_defaults(self):
        settings = ToolGateSettings.create()
        assert settings.target_keyword == "tooluniverse"
        assert settings.trusted_server_names == ["tooluniverse"]
        assert settings.auto_approve_tools == []
        assert settings.progress_param == "task_progress"
        assert settings.focus_chain_enabled is False
        assert settings.enable_notifications is True
        assert settings.no_response_placeholder == "(No response)"

    def test_trusted_servers_follow_keyword(self):
        settings = ToolGateSettings.create(target_keyword="sciencehub")
        assert settings.trusted_server_names == ["sciencehub"]

    def test_trusted_servers_can_be_disabled(self, monkeypatch):
        monkeypatch.setenv("TOOLGATE_TRUSTED_SERVER_NAMES", "[]")
        settings = ToolGateSettings.create(target_keyword="sciencehub")
        assert settings.trusted_server_names == []

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("TOOLGATE_AUTO_APPROVE_TOOLS", '["search", "fetch"]')
        monkeypatch.setenv("TOOLGATE_FOCUS_CHAIN_ENABLED", "true")
        settings = ToolGateSettings.create()
        assert settings.auto_approve_tools == ["search", "fetch"]
        assert settings.focus_chain_enabled is True

    def test_current_provider_follows_mode(self):
        settings = ToolGateSettings.create(
            mode="plan", plan_mode_provider="anthropic", act_mode_provider="openai"
        )
        assert settings.current_provider == "anthropic"
        settings = ToolGateSettings.create(
            mode="act", plan_mode_provider="anthropic", act_mode_provider="openai"
        )
        assert settings.current_provider == "openai"

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text(
            "target_keyword: sciencehub\n"
            "trusted_server_names: []\n"
            "auto_approve_tools:\n  - search\n",
            encoding="utf-8",
        )
        settings = ToolGateSettings.from_yaml(path, enable_notifications=False)
        assert settings.target_keyword == "sciencehub"
        assert settings.trusted_server_names == []
        assert settings.auto_approve_tools == ["search"]
        assert settings.enable_notifications is False

    def test_from_missing_yaml_uses_defaults(self, tmp_path):
        settings = load_settings(tmp_path / "absent.yaml")
        assert settings.target_keyword == "tooluniverse"

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("target_keyword: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            ToolGateSettings.from_yaml(path)

    def test_non_mapping_yaml(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            ToolGateSettings.from_yaml(path)

    def test_invalid_value(self):
        with pytest.raises(ConfigurationError) as exc_info:
            ToolGateSettings.create(mode="review")
        assert exc_info.value.config_key == "mode"

    def test_blank_keyword_rejected(self):
        with pytest.raises(ConfigurationError):
            ToolGateSettings.create(target_keyword="   ")
