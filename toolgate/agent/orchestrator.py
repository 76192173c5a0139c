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

"""Tool invocation orchestration.

The orchestrator is the only component the agent loop talks to. For one
tool call it:

1. Updates the streaming preview while fragments arrive
2. On finalization, resolves the server again and coerces the arguments
3. Makes the binding approval decision
4. Runs the optional pre-execution hook
5. Drains notifications, invokes the tool, drains notifications again
6. Assembles the result for the user and the model

Design Pattern: Facade over small single-purpose components
- ServerResolver: which server runs the call
- ArgumentCoercer: string arguments back into structures
- ApprovalGate: previews and approval
- HookRunner: pre-execution checkpoint
- NotificationDrain: out-of-band server messages
- ResultAssembler: heterogeneous result into text and images

Usage:
    from toolgate.agent.orchestrator import ToolInvocationOrchestrator

    orchestrator = ToolInvocationOrchestrator(registry=registry, ui=ui, settings=settings)

    await orchestrator.on_partial_fragment(fragment)      # while streaming
    outcome = await orchestrator.execute(final_fragment, context)
    tool_response = outcome.to_text()
"""

import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, Union

from toolgate.agent.approval import (
    AllowListApprovalPolicy,
    ApprovalEnvelope,
    ApprovalGate,
    AutoApprovalPolicy,
)
from toolgate.agent.argument_coercer import ArgumentCoercer, strip_side_channel
from toolgate.agent.hooks import HookResult, HookRunner, PreExecutionHook
from toolgate.agent.invocation import InvocationContext, ToolCallFragment
from toolgate.agent.messages import MessageKind, UIMessenger
from toolgate.agent.notifications import NotificationDrain
from toolgate.agent.outcome import (
    Completed,
    Denied,
    DenialSource,
    ExecutionError,
    InvocationOutcome,
)
from toolgate.agent.result_assembler import ResultAssembler
from toolgate.agent.telemetry import TelemetryEmitter, TelemetrySink
from toolgate.config.settings import ToolGateSettings
from toolgate.core.errors import error_message
from toolgate.integrations.mcp.registry import ToolCallResult, ToolServerRegistry
from toolgate.integrations.mcp.resolver import ResolvedTarget, ServerResolver

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[Any], Union[None, Awaitable[None]]]


class ToolInvocationOrchestrator:
    """Run one agent-issued tool call end to end.

    Invocations are sequential; this class does not guard against two
    calls interleaving on the same instance.
    """

    def __init__(
        self,
        registry: ToolServerRegistry,
        ui: UIMessenger,
        settings: Optional[ToolGateSettings] = None,
        policy: Optional[AutoApprovalPolicy] = None,
        hook: Optional[PreExecutionHook] = None,
        telemetry: Optional[Union[TelemetryEmitter, TelemetrySink]] = None,
        resolver: Optional[ServerResolver] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        """Initialize the orchestrator.

        Args:
            registry: Registry of tool servers
            ui: UI message collaborator
            settings: Settings; defaults are loaded from the environment
            policy: Auto-approval policy; defaults to the settings allow list
            hook: Optional pre-execution hook
            telemetry: Telemetry emitter or sink
            resolver: Server resolver; defaults to keyword matching
            progress_callback: Receives the stripped progress field when
                focus chain is enabled
        """
        self.settings = settings or ToolGateSettings.create()
        self._registry = registry
        self._ui = ui
        self._progress_callback = progress_callback

        if isinstance(telemetry, TelemetryEmitter):
            self.telemetry = telemetry
        else:
            self.telemetry = TelemetryEmitter(telemetry)

        self.resolver = resolver or ServerResolver(fallback_name=self.settings.target_keyword)
        self.coercer = ArgumentCoercer()
        self.gate = ApprovalGate(
            ui,
            policy=policy or AllowListApprovalPolicy(self.settings.auto_approve_tools),
            telemetry=self.telemetry,
            trusted_server_names=self.settings.trusted_server_names,
            enable_notifications=self.settings.enable_notifications,
        )
        self.hooks = HookRunner(hook)
        self.drain = NotificationDrain(registry, ui)
        self.assembler = ResultAssembler(self.settings.no_response_placeholder)

    @staticmethod
    def describe(call: ToolCallFragment) -> str:
        return f"[Executing {call.name}...]"

    def _resolve(self, call: ToolCallFragment) -> ResolvedTarget:
        # Never cached: the registry may change between preview and finalization.
        return self.resolver.resolve(self._registry.list_servers(), call.name)

    async def on_partial_fragment(self, call: ToolCallFragment) -> None:
        """Update the live preview for a call still being streamed."""
        target = self._resolve(call)
        arguments, _ = strip_side_channel(call.params, self.settings.progress_param)
        envelope = ApprovalEnvelope.build(target.server_name, target.tool_name, arguments)
        await self.gate.preview(target, envelope)

    async def handle(
        self, call: ToolCallFragment, context: InvocationContext
    ) -> Optional[InvocationOutcome]:
        """Dispatch a fragment: preview when partial, execute otherwise."""
        if call.partial:
            await self.on_partial_fragment(call)
            return None
        return await self.execute(call, context)

    async def execute(self, call: ToolCallFragment, context: InvocationContext) -> InvocationOutcome:
        """Run a finalized call.

        Returns:
            Denied, Completed, or ExecutionError

        Raises:
            ValueError: If the fragment is still partial
            HookExecutionError: If the pre-execution hook raised
        """
        if call.partial:
            raise ValueError(f"Cannot execute partial tool call '{call.name}'")

        target = self._resolve(call)
        arguments, progress = strip_side_channel(call.params, self.settings.progress_param)
        if progress and self.settings.focus_chain_enabled:
            await self._report_progress(progress)

        input_schema = target.tool.input_schema if target.tool is not None else None
        arguments = self.coercer.coerce(arguments, input_schema)
        context.task_state.consecutive_mistake_count = 0

        envelope = ApprovalEnvelope.build(target.server_name, target.tool_name, arguments)
        provider = context.provider or self.settings.current_provider
        decision = await self.gate.decide(context, call, target, envelope, provider=provider)
        if not decision.approved:
            return Denied(source=DenialSource.USER)

        if await self.hooks.run(context, call) is HookResult.CANCELLED:
            return Denied(source=DenialSource.HOOK)

        await self._ui.say(MessageKind.MCP_SERVER_REQUEST_STARTED)

        try:
            await self.drain.drain()
            raw_result = await self._registry.invoke(target.server_name, target.tool_name, arguments)
            await self.drain.drain()

            result = ToolCallResult.coerce(raw_result)
            assembled = self.assembler.assemble(result, context.model.supports_images)
            await self._ui.say(MessageKind.MCP_SERVER_RESPONSE, assembled.display_text)
            return Completed(text=assembled.model_text, images=assembled.images)
        except Exception as e:
            logger.warning(f"Tool '{target.tool_name}' on '{target.server_name}' failed: {e}")
            return ExecutionError(message=error_message(e))

    async def _report_progress(self, progress: Any) -> None:
        if self._progress_callback is None:
            return
        result = self._progress_callback(progress)
        if inspect.isawaitable(result):
            await result
