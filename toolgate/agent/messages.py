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

"""UI message collaborator contract.

The orchestrator never renders anything. It talks to the UI through
``UIMessenger``: ``say`` for informational messages, ``ask`` for prompts
that wait on the user, and ``retract_last_partial`` to drop a stale
streaming preview of a given channel and kind before a new one is shown.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


class MessageChannel(str, Enum):
    """Whether a UI message waits for the user."""

    ASK = "ask"
    SAY = "say"


class MessageKind(str, Enum):
    """Kinds of messages emitted while invoking a tool."""

    USE_MCP_SERVER = "use_mcp_server"
    MCP_SERVER_REQUEST_STARTED = "mcp_server_request_started"
    MCP_NOTIFICATION = "mcp_notification"
    MCP_SERVER_RESPONSE = "mcp_server_response"
    USER_FEEDBACK = "user_feedback"


@dataclass
class ApprovalResponse:
    """User answer to an approval prompt.

    Attributes:
        approved: Whether the user allowed the call
        feedback: Optional free text sent along with the answer
    """

    approved: bool
    feedback: Optional[str] = None


@runtime_checkable
class UIMessenger(Protocol):
    """Protocol for the UI message log."""

    async def say(self, kind: MessageKind, text: Optional[str] = None, partial: bool = False) -> None:
        """Append an informational message (or update a partial one)."""
        ...

    async def ask(self, kind: MessageKind, text: str, partial: bool = False) -> ApprovalResponse:
        """Show a prompt. Partial prompts may raise PreviewSuperseded."""
        ...

    async def retract_last_partial(self, channel: MessageChannel, kind: MessageKind) -> None:
        """Remove the last message if it is a partial of this channel and kind."""
        ...

    def notify(self, message: str) -> None:
        """Raise a system notification outside the message log."""
        ...


def show_notification_for_approval(ui: UIMessenger, message: str, enabled: bool) -> None:
    """Surface a system notification when the user must approve something."""
    if not enabled:
        logger.debug(f"Approval notification suppressed: {message}")
        return
    ui.notify(message)
