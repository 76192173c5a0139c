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

"""Approval of tool calls.

This module provides:
- The approval envelope shown to the user for previews and final prompts
- Auto-approval policies keyed by tool name
- ApprovalGate, which routes streaming previews and makes the binding
  auto/manual decision for a finalized call

A call is auto-approved when ANY of these hold:
- the auto-approval policy accepts the tool name
- the resolved tool entry has its own ``auto_approve`` flag set
- the resolved server is one of the trusted server names

Trusted servers are a product shortcut for the bundled tool hub; they are
configured explicitly (``trusted_server_names``) and can be disabled.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional, Protocol, runtime_checkable

from toolgate.agent.invocation import InvocationContext, ToolCallFragment
from toolgate.agent.messages import (
    MessageChannel,
    MessageKind,
    UIMessenger,
    show_notification_for_approval,
)
from toolgate.agent.telemetry import TelemetryEmitter, ToolUsageEvent
from toolgate.core.errors import PreviewSuperseded
from toolgate.integrations.mcp.resolver import ResolvedTarget

logger = logging.getLogger(__name__)

ENVELOPE_TYPE = "use_mcp_tool"


def to_json(value: Any) -> str:
    """Compact JSON encoding used for everything shown in envelopes."""
    return json.dumps(value, ensure_ascii=False, allow_nan=False, separators=(",", ":"), default=str)


@dataclass(frozen=True)
class ApprovalEnvelope:
    """Wire form of a tool call shown to the UI.

    ``arguments_json`` is always a JSON string, never a raw object, for
    partial previews and final prompts alike.
    """

    server_name: str
    tool_name: str
    arguments_json: str
    kind: str = ENVELOPE_TYPE

    @classmethod
    def build(cls, server_name: str, tool_name: str, arguments: Mapping[str, Any]) -> "ApprovalEnvelope":
        return cls(server_name=server_name, tool_name=tool_name, arguments_json=to_json(dict(arguments)))

    def to_json(self) -> str:
        return to_json(
            {
                "type": self.kind,
                "serverName": self.server_name,
                "toolName": self.tool_name,
                "arguments": self.arguments_json,
            }
        )


@runtime_checkable
class AutoApprovalPolicy(Protocol):
    """Decides from the tool name alone whether a call may skip confirmation."""

    def is_auto_approved(self, tool_name: str) -> bool: ...


class AllowListApprovalPolicy:
    """Auto-approve tools on an allow list. ``"*"`` approves everything."""

    WILDCARD = "*"

    def __init__(self, tool_names: Optional[Iterable[str]] = None):
        self._tool_names = frozenset(tool_names or ())

    def is_auto_approved(self, tool_name: str) -> bool:
        return self.WILDCARD in self._tool_names or tool_name in self._tool_names


@dataclass
class ApprovalDecision:
    """Binding approval result for one call.

    Attributes:
        auto_approved: Whether no user confirmation was needed
        approved: Whether the call may run
        reasons: Which auto-approval signals fired
        feedback: Text the user sent with their answer, if any
    """

    auto_approved: bool
    approved: bool
    reasons: List[str] = field(default_factory=list)
    feedback: Optional[str] = None


class ApprovalGate:
    """Route previews and decide approval for tool calls.

    Every preview retracts the stale partial it replaces before emitting, so
    the UI never shows two previews for one call.
    """

    def __init__(
        self,
        ui: UIMessenger,
        policy: Optional[AutoApprovalPolicy] = None,
        telemetry: Optional[TelemetryEmitter] = None,
        trusted_server_names: Iterable[str] = (),
        enable_notifications: bool = True,
        agent_name: str = "Agent",
    ):
        self._ui = ui
        self._policy = policy or AllowListApprovalPolicy()
        self._telemetry = telemetry or TelemetryEmitter()
        self.trusted_server_names = frozenset(trusted_server_names)
        self.enable_notifications = enable_notifications
        self.agent_name = agent_name

    async def preview(self, target: ResolvedTarget, envelope: ApprovalEnvelope) -> None:
        """Show or update the streaming preview of a call."""
        text = envelope.to_json()
        if self._policy.is_auto_approved(target.tool_name):
            await self._ui.retract_last_partial(MessageChannel.ASK, MessageKind.USE_MCP_SERVER)
            await self._ui.retract_last_partial(MessageChannel.SAY, MessageKind.USE_MCP_SERVER)
            await self._ui.say(MessageKind.USE_MCP_SERVER, text, partial=True)
            return

        await self._ui.retract_last_partial(MessageChannel.SAY, MessageKind.USE_MCP_SERVER)
        await self._ui.retract_last_partial(MessageChannel.ASK, MessageKind.USE_MCP_SERVER)
        try:
            await self._ui.ask(MessageKind.USE_MCP_SERVER, text, partial=True)
        except PreviewSuperseded:
            logger.debug(f"Preview for '{target.tool_name}' superseded by a newer fragment")

    def auto_approval_reasons(self, target: ResolvedTarget) -> List[str]:
        """Names of the auto-approval signals that fire for a target."""
        reasons = []
        if self._policy.is_auto_approved(target.tool_name):
            reasons.append("policy")
        if target.tool is not None and target.tool.auto_approve:
            reasons.append("tool_flag")
        if target.server_name in self.trusted_server_names:
            reasons.append("trusted_server")
        return reasons

    async def decide(
        self,
        context: InvocationContext,
        call: ToolCallFragment,
        target: ResolvedTarget,
        envelope: ApprovalEnvelope,
        provider: Optional[str] = None,
    ) -> ApprovalDecision:
        """Make the binding approval decision, asking the user if needed."""
        text = envelope.to_json()
        reasons = self.auto_approval_reasons(target)

        if reasons:
            logger.info(f"Auto-approved '{target.tool_name}' on '{target.server_name}' ({', '.join(reasons)})")
            await self._ui.retract_last_partial(MessageChannel.ASK, MessageKind.USE_MCP_SERVER)
            await self._ui.say(MessageKind.USE_MCP_SERVER, text, partial=False)
            self._capture(context, call, provider, auto_approved=True, approved=True)
            return ApprovalDecision(auto_approved=True, approved=True, reasons=reasons)

        show_notification_for_approval(
            self._ui,
            f"{self.agent_name} wants to use {target.tool_name} on {target.server_name}",
            self.enable_notifications,
        )
        await self._ui.retract_last_partial(MessageChannel.SAY, MessageKind.USE_MCP_SERVER)
        response = await self._ui.ask(MessageKind.USE_MCP_SERVER, text, partial=False)
        if response.feedback:
            await self._ui.say(MessageKind.USER_FEEDBACK, response.feedback)

        logger.info(
            f"User {'approved' if response.approved else 'denied'} '{target.tool_name}' "
            f"on '{target.server_name}'"
        )
        self._capture(context, call, provider, auto_approved=False, approved=response.approved)
        return ApprovalDecision(
            auto_approved=False, approved=response.approved, feedback=response.feedback
        )

    def _capture(
        self,
        context: InvocationContext,
        call: ToolCallFragment,
        provider: Optional[str],
        auto_approved: bool,
        approved: bool,
    ) -> None:
        self._telemetry.capture(
            ToolUsageEvent(
                task_id=context.task_id,
                tool_name=call.name,
                model_id=context.model.model_id,
                provider=provider,
                is_auto_approved=auto_approved,
                is_approved=approved,
                error_info=None,
                is_native_call=call.is_native_call,
            )
        )
