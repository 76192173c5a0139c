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

"""Tool usage telemetry.

Events are handed to a sink in the background. Emission never blocks the
invocation and sink failures are only logged.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Protocol, Set, runtime_checkable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolUsageEvent:
    """One approval outcome for a tool call.

    Attributes:
        task_id: Identifier of the agent task
        tool_name: Tool that was requested
        model_id: Model that issued the call
        provider: API provider of the active mode
        is_auto_approved: Whether approval was automatic
        is_approved: Whether the call was allowed to run
        error_info: Optional error description
        is_native_call: Whether the call came from native tool calling
    """

    task_id: str
    tool_name: str
    model_id: str
    provider: Optional[str]
    is_auto_approved: bool
    is_approved: bool
    error_info: Optional[str] = None
    is_native_call: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@runtime_checkable
class TelemetrySink(Protocol):
    """Receives tool usage events. May be sync or async."""

    def capture_tool_usage(self, event: ToolUsageEvent) -> Any: ...


class TelemetryEmitter:
    """Fire-and-forget wrapper around a TelemetrySink."""

    def __init__(self, sink: Optional[TelemetrySink] = None):
        self._sink = sink
        self._pending: Set[asyncio.Task[None]] = set()

    @property
    def enabled(self) -> bool:
        return self._sink is not None

    def capture(self, event: ToolUsageEvent) -> None:
        """Schedule delivery of an event without waiting for it."""
        if self._sink is None:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No running loop, deliver inline
            asyncio.run(self._deliver(event))
            return
        task = loop.create_task(self._deliver(event))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _deliver(self, event: ToolUsageEvent) -> None:
        assert self._sink is not None
        try:
            result = self._sink.capture_tool_usage(event)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.warning(f"Failed to capture tool usage for '{event.tool_name}': {e}")

    async def wait_pending(self) -> None:
        """Wait for events already scheduled (shutdown and tests)."""
        if self._pending:
            await asyncio.gather(*list(self._pending))
