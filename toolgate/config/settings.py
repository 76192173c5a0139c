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

"""Configuration management for ToolGate.

Settings are read from ``TOOLGATE_*`` environment variables and may be
overlaid with a YAML file:

    settings = ToolGateSettings.from_yaml("~/.toolgate/settings.yaml")

List values in the environment use JSON syntax, e.g.
``TOOLGATE_AUTO_APPROVE_TOOLS='["search", "fetch"]'``.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Union

import yaml
from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from toolgate.core.errors import ConfigurationError

DEFAULT_TARGET_KEYWORD = "tooluniverse"


class ToolGateSettings(BaseSettings):
    """Settings for the tool invocation orchestrator."""

    model_config = SettingsConfigDict(
        env_prefix="TOOLGATE_",
        env_file=".env" if not os.getenv("TOOLGATE_SKIP_ENV_FILE") else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server resolution
    target_keyword: str = DEFAULT_TARGET_KEYWORD

    # Approval
    # Servers whose tools always run without confirmation. Defaults to
    # [target_keyword]; an explicit empty list disables the shortcut.
    trusted_server_names: Optional[List[str]] = None
    auto_approve_tools: List[str] = Field(default_factory=list)
    enable_notifications: bool = True

    # UI-only side channel, never forwarded to tools
    progress_param: str = "task_progress"
    focus_chain_enabled: bool = False

    # Telemetry context
    mode: Literal["plan", "act"] = "act"
    plan_mode_provider: Optional[str] = None
    act_mode_provider: Optional[str] = None

    no_response_placeholder: str = "(No response)"

    @field_validator("target_keyword", "progress_param")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()

    @model_validator(mode="after")
    def default_trusted_servers(self) -> "ToolGateSettings":
        if self.trusted_server_names is None:
            self.trusted_server_names = [self.target_keyword]
        return self

    @property
    def current_provider(self) -> Optional[str]:
        """Provider of the active mode, as reported in telemetry."""
        return self.plan_mode_provider if self.mode == "plan" else self.act_mode_provider

    @classmethod
    def from_yaml(cls, path: Union[str, Path], **overrides: Any) -> "ToolGateSettings":
        """Load settings from a YAML file.

        Explicit ``overrides`` win over file values, which win over the environment.

        Raises:
            ConfigurationError: If the file cannot be parsed or holds invalid values
        """
        config_path = Path(path).expanduser()
        data: Dict[str, Any] = {}
        if config_path.exists():
            try:
                with open(config_path, "r", encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(
                    f"Failed to parse settings file {config_path}: {e}", cause=e
                ) from e
            if not isinstance(data, dict):
                raise ConfigurationError(
                    f"Settings file {config_path} must contain a mapping at top level"
                )
        data.update(overrides)
        return cls.create(**data)

    @classmethod
    def create(cls, **values: Any) -> "ToolGateSettings":
        """Build settings, converting validation errors to ConfigurationError."""
        try:
            return cls(**values)
        except ValidationError as e:
            first = e.errors()[0] if e.errors() else {}
            key = ".".join(str(part) for part in first.get("loc", ())) or None
            raise ConfigurationError(
                f"Invalid settings: {first.get('msg', e)}", config_key=key, cause=e
            ) from e


def load_settings(path: Optional[Union[str, Path]] = None) -> ToolGateSettings:
    """Load application settings.

    Args:
        path: Optional YAML settings file

    Returns:
        ToolGateSettings instance
    """
    if path is not None:
        return ToolGateSettings.from_yaml(path)
    return ToolGateSettings.create()
