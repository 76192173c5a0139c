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

"""Tool result assembly for the agent loop.

Turns a heterogeneous tool result (text, images, embedded resources) into:

1. **Display text** for the user, with every image appended as a data URI.
2. **Model text** for the reasoning model. Raw image data is never embedded;
   models without image support get a note about what they cannot see.
3. **Images** as a separate list, only when the model can consume them.

Usage:
    assembler = ResultAssembler()
    assembled = assembler.assemble(result, supports_images=False)
    await ui.say(MessageKind.MCP_SERVER_RESPONSE, assembled.display_text)
"""

import json
import logging
from dataclasses import dataclass
from typing import List, Optional

from toolgate.integrations.mcp.registry import (
    ImageContent,
    ResourceContent,
    TextContent,
    ToolCallResult,
)

logger = logging.getLogger(__name__)

PARAGRAPH_SEPARATOR = "\n\n"
ERROR_PREFIX = "Error:\n"
DEFAULT_NO_RESPONSE = "(No response)"

# Resource fields holding binary payload, never rendered as text
BINARY_RESOURCE_FIELDS = ("blob",)


def omitted_images_note(count: int) -> str:
    return (
        f"[{count} images were provided in the response, and while they are displayed "
        "to the user, you do not have the ability to view them.]"
    )


@dataclass
class AssembledResult:
    """Result split for the user and for the reasoning model.

    Attributes:
        model_text: Text returned to the reasoning model
        display_text: Text shown to the user, images inlined as data URIs
        images: Data URIs for the model, None when it cannot view images
    """

    model_text: str
    display_text: str
    images: Optional[List[str]] = None


class ResultAssembler:
    """Build AssembledResult objects from tool call results."""

    def __init__(self, no_response_placeholder: str = DEFAULT_NO_RESPONSE):
        self.no_response_placeholder = no_response_placeholder

    def assemble(self, result: ToolCallResult, supports_images: bool) -> AssembledResult:
        images = [item.to_data_uri() for item in result.content if isinstance(item, ImageContent)]
        body = self._text_body(result)

        if not body and not images:
            body = self.no_response_placeholder
        if result.is_error:
            body = ERROR_PREFIX + body

        display_text = _join([body, *images])

        if images and not supports_images:
            logger.debug(f"Model cannot view images, omitting {len(images)} from model text")
            return AssembledResult(
                model_text=_join([body, omitted_images_note(len(images))]),
                display_text=display_text,
                images=None,
            )

        return AssembledResult(
            model_text=body,
            display_text=display_text,
            images=images if supports_images and images else None,
        )

    def _text_body(self, result: ToolCallResult) -> str:
        parts: List[str] = []
        for item in result.content:
            if isinstance(item, TextContent):
                parts.append(item.text)
            elif isinstance(item, ResourceContent):
                parts.append(render_resource(item))
        return _join(parts)


def render_resource(item: ResourceContent) -> str:
    """Pretty-print a resource without its binary payload."""
    visible = {k: v for k, v in item.resource.items() if k not in BINARY_RESOURCE_FIELDS}
    return json.dumps(visible, indent=2, ensure_ascii=False, default=str)


def _join(parts: List[str]) -> str:
    return PARAGRAPH_SEPARATOR.join(part for part in parts if part)
