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

"""Per-call data shared by the invocation components."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class ToolCallFragment:
    """A tool call as streamed by the agent loop.

    Attributes:
        name: Tool name issued by the model
        params: Arguments received so far
        partial: Whether more tokens may still arrive
        is_native_call: Whether the call came from native tool calling
    """

    name: str
    params: Dict[str, Any] = field(default_factory=dict)
    partial: bool = True
    is_native_call: bool = True


@dataclass(frozen=True)
class ModelInfo:
    """Capabilities of the model that issued the call."""

    model_id: str
    supports_images: bool = False


@dataclass
class TaskState:
    """Mutable per-task counters owned by the agent loop."""

    consecutive_mistake_count: int = 0


@dataclass
class InvocationContext:
    """Everything about the current task an invocation needs.

    Attributes:
        task_id: Identifier of the agent task, used in telemetry
        model: Model capabilities
        provider: API provider override; settings decide when None
        task_state: Counters reset by a well-formed call
        metadata: Free-form data for hooks
    """

    task_id: str
    model: ModelInfo
    provider: Optional[str] = None
    task_state: TaskState = field(default_factory=TaskState)
    metadata: Dict[str, Any] = field(default_factory=dict)
