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

"""Outcomes of a tool invocation, as returned to the agent loop."""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union

TOOL_DENIED_TEXT = "The user denied this operation."
EXECUTION_ERROR_PREFIX = "Error executing MCP tool: "


class DenialSource(str, Enum):
    USER = "user"
    HOOK = "hook"


@dataclass(frozen=True)
class Denied:
    """The call did not run: the user refused it or a hook cancelled it."""

    source: DenialSource = DenialSource.USER

    def to_text(self) -> str:
        return TOOL_DENIED_TEXT


@dataclass(frozen=True)
class Completed:
    """The tool ran. ``images`` is None unless the model can view them."""

    text: str
    images: Optional[List[str]] = None

    def to_text(self) -> str:
        return self.text


@dataclass(frozen=True)
class ExecutionError:
    """The underlying tool call raised."""

    message: str

    def to_text(self) -> str:
        return f"{EXECUTION_ERROR_PREFIX}{self.message}"


InvocationOutcome = Union[Denied, Completed, ExecutionError]
