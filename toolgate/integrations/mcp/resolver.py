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

"""Server resolution for tool calls.

Users may rename the tool hub server, so the target is found by identity
heuristics instead of by exact name:

1. Case-insensitive keyword match on the server name
2. Keyword match in the launch config ``args`` array, or else its ``command``
3. Otherwise the keyword itself is used as the server name

Resolution never fails. An unregistered fallback name fails later, at
execution. Results are not cached: the registry can change between the
preview and finalization of a single call.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol, Sequence

from toolgate.config.settings import DEFAULT_TARGET_KEYWORD
from toolgate.integrations.mcp.registry import RegisteredServer, RegisteredTool

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedTarget:
    """Server and tool identity resolved for one call.

    Attributes:
        server_name: Resolved server name (may be the unregistered fallback)
        tool_name: Tool name as issued by the agent
        server: The matched registry entry, if any
        tool: The matched tool entry on that server, if any
        is_fallback: Whether no server matched and the fallback name was used
    """

    server_name: str
    tool_name: str
    server: Optional[RegisteredServer] = None
    tool: Optional[RegisteredTool] = None
    is_fallback: bool = False


class ServerResolutionStrategy(Protocol):
    """Decides whether a registered server is the call target."""

    def matches(self, server: RegisteredServer) -> bool: ...


class KeywordResolutionStrategy:
    """Match servers whose name or launch config mentions a keyword."""

    def __init__(self, keyword: str = DEFAULT_TARGET_KEYWORD):
        self.keyword = keyword.lower()

    def matches(self, server: RegisteredServer) -> bool:
        if self.keyword in server.name.lower():
            return True
        return self._config_matches(server)

    def _config_matches(self, server: RegisteredServer) -> bool:
        try:
            config: Any = json.loads(server.raw_config)
        except (TypeError, ValueError):
            logger.debug(f"Ignoring unparseable config for server '{server.name}'")
            return False
        if not isinstance(config, dict):
            return False

        args = config.get("args")
        if isinstance(args, list):
            return any(isinstance(arg, str) and self.keyword in arg.lower() for arg in args)

        command = config.get("command")
        return isinstance(command, str) and self.keyword in command.lower()


class ServerResolver:
    """Resolve tool calls to a registered server, first match wins."""

    def __init__(
        self,
        strategy: Optional[ServerResolutionStrategy] = None,
        fallback_name: str = DEFAULT_TARGET_KEYWORD,
    ):
        self.strategy = strategy or KeywordResolutionStrategy(fallback_name)
        self.fallback_name = fallback_name

    def resolve_server(self, servers: Sequence[RegisteredServer]) -> Optional[RegisteredServer]:
        for server in servers:
            if self.strategy.matches(server):
                return server
        return None

    def resolve(self, servers: Sequence[RegisteredServer], tool_name: str) -> ResolvedTarget:
        """Resolve the target server and tool entry for a call.

        The tool name does not take part in server matching. It is only used
        to look up the tool entry (schema, auto-approve flag) on the server
        whose name equals the resolved one.
        """
        matched = self.resolve_server(servers)
        server_name = matched.name if matched is not None else self.fallback_name

        # A server registered under the fallback name still provides tool metadata.
        server = next((s for s in servers if s.name == server_name), None)
        tool = server.find_tool(tool_name) if server is not None else None

        if matched is None:
            logger.debug(f"No server matched for '{tool_name}', using '{server_name}'")
        return ResolvedTarget(
            server_name=server_name,
            tool_name=tool_name,
            server=server,
            tool=tool,
            is_fallback=matched is None,
        )
