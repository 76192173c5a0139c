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

"""Agent module - tool invocation orchestrator and supporting components."""

from toolgate.agent.approval import (
    AllowListApprovalPolicy,
    ApprovalDecision,
    ApprovalEnvelope,
    ApprovalGate,
    AutoApprovalPolicy,
)
from toolgate.agent.argument_coercer import ArgumentCoercer, CoercionDecision
from toolgate.agent.hooks import HookResult, HookRunner, PreExecutionHook
from toolgate.agent.messages import ApprovalResponse, MessageChannel, MessageKind, UIMessenger
from toolgate.agent.notifications import NotificationDrain
from toolgate.agent.orchestrator import ToolInvocationOrchestrator
from toolgate.agent.result_assembler import AssembledResult, ResultAssembler
from toolgate.agent.telemetry import TelemetryEmitter, TelemetrySink, ToolUsageEvent

__all__ = [
    "AllowListApprovalPolicy",
    "ApprovalDecision",
    "ApprovalEnvelope",
    "ApprovalGate",
    "ApprovalResponse",
    "ArgumentCoercer",
    "AssembledResult",
    "AutoApprovalPolicy",
    "CoercionDecision",
    "HookResult",
    "HookRunner",
    "MessageChannel",
    "MessageKind",
    "NotificationDrain",
    "PreExecutionHook",
    "ResultAssembler",
    "TelemetryEmitter",
    "TelemetrySink",
    "ToolInvocationOrchestrator",
    "ToolUsageEvent",
    "UIMessenger",
]
