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

"""
ToolGate - orchestration of agent-issued tool calls against MCP tool servers.

Resolves the target server, coerces arguments against the tool schema,
decides approval, runs pre-execution hooks, forwards server notifications,
invokes the tool and assembles its result for the agent loop.

Usage:
    from toolgate import ToolInvocationOrchestrator, ToolGateSettings

    orchestrator = ToolInvocationOrchestrator(
        registry=registry,
        ui=ui,
        settings=ToolGateSettings.create(auto_approve_tools=["search"]),
    )
    outcome = await orchestrator.execute(call, context)
"""

__version__ = "0.1.0"
__license__ = "Apache-2.0"

from toolgate.agent.invocation import InvocationContext, ModelInfo, ToolCallFragment
from toolgate.agent.orchestrator import ToolInvocationOrchestrator
from toolgate.agent.outcome import Completed, Denied, ExecutionError, InvocationOutcome
from toolgate.config.settings import ToolGateSettings, load_settings

__all__ = [
    "Completed",
    "Denied",
    "ExecutionError",
    "InvocationContext",
    "InvocationOutcome",
    "ModelInfo",
    "ToolCallFragment",
    "ToolGateSettings",
    "ToolInvocationOrchestrator",
    "load_settings",
]
