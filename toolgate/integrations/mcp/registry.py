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

"""Tool server registry types for MCP integration.

The orchestrator only reads from a registry: the ordered server list with
their tools, the pending notification queue, and ``invoke`` to run a tool
once its server is known. Discovery and transport live elsewhere.

Usage:
    from toolgate.integrations.mcp.registry import (
        InMemoryServerRegistry,
        RegisteredServer,
        RegisteredTool,
    )

    registry = InMemoryServerRegistry()
    registry.add_server(
        RegisteredServer(
            name="tooluniverse",
            raw_config='{"command": "uvx", "args": ["tooluniverse"]}',
            tools=[RegisteredTool(name="search", auto_approve=True)],
        ),
        handler=my_async_handler,
    )
"""

from __future__ import annotations

import inspect
import logging
import threading
from collections import deque
from dataclasses import dataclass, field
from typing import (
    Any,
    Awaitable,
    Callable,
    Deque,
    Dict,
    List,
    Optional,
    Protocol,
    Sequence,
    Union,
    runtime_checkable,
)

from toolgate.core.errors import ToolExecutionError, ToolNotFoundError

logger = logging.getLogger(__name__)


# =============================================================================
# Registry entries
# =============================================================================


@dataclass(frozen=True)
class RegisteredTool:
    """A tool exposed by a registered server.

    Attributes:
        name: Tool name as exposed by the server
        input_schema: JSON-schema-like description of the arguments, if any
        auto_approve: Whether the user allowed this tool to run unconfirmed
    """

    name: str
    input_schema: Optional[Dict[str, Any]] = None
    auto_approve: bool = False


@dataclass(frozen=True)
class RegisteredServer:
    """A registered tool server.

    Attributes:
        name: Server name, unique within the registry
        raw_config: Opaque JSON config the server was launched with
        tools: Tools exposed by the server, in registration order
    """

    name: str
    raw_config: str = "{}"
    tools: Sequence[RegisteredTool] = field(default_factory=tuple)

    def find_tool(self, tool_name: str) -> Optional[RegisteredTool]:
        """Get a tool by exact name."""
        for tool in self.tools:
            if tool.name == tool_name:
                return tool
        return None


@dataclass(frozen=True)
class Notification:
    """Out-of-band message queued by a server."""

    server_name: str
    message: str

    def format(self) -> str:
        return f"[{self.server_name}] {self.message}"


# =============================================================================
# Tool results
# =============================================================================


@dataclass(frozen=True)
class TextContent:
    text: str


@dataclass(frozen=True)
class ImageContent:
    mime_type: str
    data: str

    def to_data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


@dataclass(frozen=True)
class ResourceContent:
    """Embedded resource; ``blob`` holds binary payload when present."""

    resource: Dict[str, Any]


ToolResultContentItem = Union[TextContent, ImageContent, ResourceContent]


def parse_content_item(item: Dict[str, Any]) -> Optional[ToolResultContentItem]:
    """Convert an MCP wire content item into a typed item.

    Unknown content types are dropped with a debug log.
    """
    item_type = item.get("type")
    if item_type == "text":
        return TextContent(text=str(item.get("text") or ""))
    if item_type == "image":
        return ImageContent(mime_type=item.get("mimeType", ""), data=item.get("data", ""))
    if item_type == "resource":
        resource = item.get("resource")
        return ResourceContent(resource=dict(resource) if isinstance(resource, dict) else {})
    logger.debug(f"Dropping unsupported content item type: {item_type!r}")
    return None


@dataclass
class ToolCallResult:
    """Result of a tool invocation.

    Attributes:
        content: Heterogeneous content items in server order
        is_error: Whether the tool flagged the result as an error
    """

    content: List[ToolResultContentItem] = field(default_factory=list)
    is_error: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ToolCallResult":
        """Build from an MCP ``tools/call`` result payload."""
        items = []
        for raw in data.get("content") or []:
            if isinstance(raw, dict):
                parsed = parse_content_item(raw)
                if parsed is not None:
                    items.append(parsed)
        return cls(content=items, is_error=bool(data.get("isError", False)))

    @classmethod
    def coerce(cls, value: Any) -> "ToolCallResult":
        """Accept a result, a wire payload, a list of items, or nothing."""
        if isinstance(value, ToolCallResult):
            return value
        if value is None:
            return cls()
        if isinstance(value, dict):
            return cls.from_dict(value)
        if isinstance(value, (list, tuple)):
            items: List[ToolResultContentItem] = []
            for entry in value:
                if isinstance(entry, dict):
                    parsed = parse_content_item(entry)
                    if parsed is not None:
                        items.append(parsed)
                elif isinstance(entry, (TextContent, ImageContent, ResourceContent)):
                    items.append(entry)
            return cls(content=items)
        raise TypeError(f"Unsupported tool result type: {type(value).__name__}")


# =============================================================================
# Registry protocol
# =============================================================================


@runtime_checkable
class ToolServerRegistry(Protocol):
    """Protocol for the external tool server registry."""

    def list_servers(self) -> List[RegisteredServer]:
        """Current servers in registration order."""
        ...

    def drain_pending_notifications(self) -> List[Notification]:
        """Return and clear all queued notifications, oldest first."""
        ...

    async def invoke(
        self, server_name: str, tool_name: str, arguments: Dict[str, Any]
    ) -> ToolCallResult:
        """Run a tool. May raise on transport failure."""
        ...


ToolHandler = Callable[[str, Dict[str, Any]], Union[Any, Awaitable[Any]]]


class InMemoryServerRegistry:
    """Process-local registry backed by plain handlers.

    Handlers receive ``(tool_name, arguments)`` and may be sync or async. They
    may return a ToolCallResult, an MCP result dict, or a list of items.
    Handler failures are raised as ToolExecutionError.
    Notifications can be pushed from any thread.
    """

    def __init__(self) -> None:
        self._servers: Dict[str, RegisteredServer] = {}
        self._handlers: Dict[str, ToolHandler] = {}
        self._notifications: Deque[Notification] = deque()
        self._lock = threading.Lock()

    def add_server(self, server: RegisteredServer, handler: Optional[ToolHandler] = None) -> None:
        """Register or replace a server (registration order is kept on replace)."""
        self._servers[server.name] = server
        if handler is not None:
            self._handlers[server.name] = handler
        logger.debug(f"Registered server '{server.name}' with {len(server.tools)} tools")

    def remove_server(self, name: str) -> bool:
        self._handlers.pop(name, None)
        return self._servers.pop(name, None) is not None

    def list_servers(self) -> List[RegisteredServer]:
        return list(self._servers.values())

    def push_notification(self, server_name: str, message: str) -> None:
        with self._lock:
            self._notifications.append(Notification(server_name=server_name, message=message))

    def drain_pending_notifications(self) -> List[Notification]:
        with self._lock:
            drained = list(self._notifications)
            self._notifications.clear()
        return drained

    async def invoke(
        self, server_name: str, tool_name: str, arguments: Dict[str, Any]
    ) -> ToolCallResult:
        server = self._servers.get(server_name)
        handler = self._handlers.get(server_name)
        if server is None or handler is None:
            raise ToolNotFoundError(tool_name, server_name=server_name)

        try:
            result = handler(tool_name, arguments)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            raise ToolExecutionError(
                str(e), tool_name=tool_name, server_name=server_name, cause=e
            ) from e
        return ToolCallResult.coerce(result)
