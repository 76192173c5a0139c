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

"""Pre-execution hooks.

A hook runs after a call is approved and before the tool executes. It can
let the call continue or cancel it; cancellation is a normal result, not an
exception. Anything a hook raises is a bug and aborts the invocation.

Example:
    class AuditHook:
        name = "audit"

        async def run(self, context, call):
            if call.name in context.metadata.get("blocked_tools", ()):
                return HookResult.CANCELLED
            return HookResult.CONTINUE

    runner = HookRunner(AuditHook())
"""

from __future__ import annotations

import inspect
import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Protocol, runtime_checkable

from toolgate.core.errors import HookExecutionError

if TYPE_CHECKING:
    from toolgate.agent.invocation import InvocationContext, ToolCallFragment

logger = logging.getLogger(__name__)


class HookResult(str, Enum):
    """Outcome of a pre-execution hook."""

    CONTINUE = "continue"
    CANCELLED = "cancelled"


@runtime_checkable
class PreExecutionHook(Protocol):
    """Protocol for pre-execution hooks.

    ``run`` may be sync or async. Returning None means CONTINUE.
    """

    name: str

    def run(self, context: "InvocationContext", call: "ToolCallFragment") -> Any: ...


class HookRunner:
    """Run the optional pre-execution hook uniformly."""

    def __init__(self, hook: Optional[PreExecutionHook] = None):
        self._hook = hook

    async def run(self, context: "InvocationContext", call: "ToolCallFragment") -> HookResult:
        """Run the hook.

        Returns:
            HookResult.CONTINUE when there is no hook or it lets the call run

        Raises:
            HookExecutionError: If the hook raised
        """
        if self._hook is None:
            return HookResult.CONTINUE

        hook_name = getattr(self._hook, "name", type(self._hook).__name__)
        try:
            result = self._hook.run(context, call)
            if inspect.isawaitable(result):
                result = await result
            outcome = HookResult.CONTINUE if result is None else HookResult(result)
        except Exception as e:
            logger.error(f"Pre-execution hook '{hook_name}' failed for '{call.name}': {e}")
            raise HookExecutionError(
                f"Pre-execution hook '{hook_name}' failed: {e}", hook_name=hook_name, cause=e
            ) from e

        if outcome is HookResult.CANCELLED:
            logger.info(f"Pre-execution hook '{hook_name}' cancelled '{call.name}'")
        return outcome
