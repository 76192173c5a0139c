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

"""Centralized error types for ToolGate.

This module provides:
- Error categories for classification
- A structured base exception with correlation IDs and recovery hints
- Tool, hook, configuration and preview error types

Only a handful of these ever cross the orchestrator boundary. Soft failures
(malformed JSON arguments, unresolvable servers, bad server config blobs) are
recovered where they happen and never raised.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(Enum):
    """Categories of errors for classification and handling."""

    # Tool errors
    TOOL_NOT_FOUND = "tool_not_found"
    TOOL_EXECUTION = "tool_execution"

    # Hook errors
    HOOK_FAILURE = "hook_failure"

    # Configuration errors
    CONFIG_INVALID = "config_invalid"

    # UI errors
    PREVIEW_SUPERSEDED = "preview_superseded"

    UNKNOWN = "unknown"


class ToolGateError(Exception):
    """Base exception for all ToolGate errors.

    Provides structured error information including:
    - Error category
    - Correlation ID for tracking
    - Recovery suggestions
    - Original exception chain
    """

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        details: Optional[Dict[str, Any]] = None,
        recovery_hint: Optional[str] = None,
        correlation_id: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category
        self.details = details or {}
        self.recovery_hint = recovery_hint
        self.correlation_id = correlation_id or str(uuid.uuid4())[:8]
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "error": self.message,
            "category": self.category.value,
            "correlation_id": self.correlation_id,
            "recovery_hint": self.recovery_hint,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
        }

    def __str__(self) -> str:
        result = f"[{self.correlation_id}] {self.message}"
        if self.recovery_hint:
            result += f"\nRecovery hint: {self.recovery_hint}"
        return result


class ToolError(ToolGateError):
    """Errors related to tool execution."""

    def __init__(
        self,
        message: str,
        tool_name: Optional[str] = None,
        server_name: Optional[str] = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.tool_name = tool_name
        self.server_name = server_name
        self.details["tool_name"] = tool_name
        self.details["server_name"] = server_name


class ToolNotFoundError(ToolError):
    """Tool or server not registered."""

    def __init__(self, tool_name: str, server_name: Optional[str] = None, **kwargs: Any):
        super().__init__(
            f"No tool '{tool_name}' registered on server '{server_name}'",
            tool_name=tool_name,
            server_name=server_name,
            category=ErrorCategory.TOOL_NOT_FOUND,
            recovery_hint="Check that the server is connected and exposes this tool.",
            **kwargs,
        )


class ToolExecutionError(ToolError):
    """Tool execution failures reported by a registry transport."""

    def __init__(self, message: str, tool_name: Optional[str] = None, **kwargs: Any):
        kwargs.setdefault("category", ErrorCategory.TOOL_EXECUTION)
        super().__init__(message, tool_name=tool_name, **kwargs)


class HookExecutionError(ToolGateError):
    """A pre-execution hook failed for a reason other than cancellation."""

    def __init__(self, message: str, hook_name: Optional[str] = None, **kwargs: Any):
        super().__init__(message, category=ErrorCategory.HOOK_FAILURE, **kwargs)
        self.hook_name = hook_name
        self.details["hook_name"] = hook_name


class ConfigurationError(ToolGateError):
    """Invalid ToolGate configuration."""

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs: Any):
        super().__init__(
            message,
            category=ErrorCategory.CONFIG_INVALID,
            recovery_hint="Check the settings file and TOOLGATE_* environment variables.",
            **kwargs,
        )
        self.config_key = config_key
        self.details["config_key"] = config_key


class PreviewSuperseded(ToolGateError):
    """A partial approval prompt was replaced by a newer fragment."""

    def __init__(self, message: str = "Partial preview superseded", **kwargs: Any):
        super().__init__(message, category=ErrorCategory.PREVIEW_SUPERSEDED, **kwargs)


def error_message(error: BaseException) -> str:
    """Return the plain message of an exception, without correlation decoration."""
    if isinstance(error, ToolGateError):
        return error.message
    return str(error)
