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

"""Tests for ResultAssembler."""

import json

from toolgate.agent.result_assembler import (
    ResultAssembler,
    omitted_images_note,
    render_resource,
)
from toolgate.integrations.mcp.registry import (
    ImageContent,
    ResourceContent,
    TextContent,
    ToolCallResult,
)

PNG = ImageContent(mime_type="image/png", data="iVBORw0KGgo=")
PNG_URI = "data:image/png;base64,iVBORw0KGgo="


class TestTextAssembly:
    """Tests for the textual body."""

    def test_text_items_joined_with_blank_line(self):
        result = ToolCallResult(content=[TextContent("one"), TextContent("two")])
        assembled = ResultAssembler().assemble(result, supports_images=False)
        assert assembled.model_text == "one\n\ntwo"
        assert assembled.display_text == "one\n\ntwo"
        assert assembled.images is None

    def test_null_text_items_skipped(self):
        """Test text items without text add no empty paragraph."""
        result = ToolCallResult.from_dict(
            {"content": [{"type": "text", "text": None}, {"type": "text", "text": "b"}]}
        )
        assembled = ResultAssembler().assemble(result, supports_images=False)
        assert assembled.model_text == "b"

    def test_empty_result_uses_placeholder(self):
        assembled = ResultAssembler().assemble(ToolCallResult(), supports_images=True)
        assert assembled.model_text == "(No response)"

    def test_custom_placeholder(self):
        assembled = ResultAssembler("nothing").assemble(ToolCallResult(), supports_images=True)
        assert assembled.model_text == "nothing"

    def test_empty_text_items_skipped(self):
        result = ToolCallResult(content=[TextContent(""), TextContent("kept")])
        assert ResultAssembler().assemble(result, False).model_text == "kept"

    def test_error_prefix(self):
        result = ToolCallResult(content=[TextContent("bad input")], is_error=True)
        assert ResultAssembler().assemble(result, False).model_text == "Error:\nbad input"

    def test_error_without_content(self):
        result = ToolCallResult(is_error=True)
        assert ResultAssembler().assemble(result, False).model_text == "Error:\n(No response)"


class TestResourceAssembly:
    """Tests for embedded resources."""

    def test_blob_never_rendered(self):
        resource = {"uri": "file:///a.bin", "mimeType": "application/pdf", "blob": "QUJD"}
        result = ToolCallResult(content=[ResourceContent(resource)])
        assembled = ResultAssembler().assemble(result, supports_images=True)
        assert "blob" not in assembled.model_text
        assert "QUJD" not in assembled.display_text
        assert json.loads(assembled.model_text) == {
            "uri": "file:///a.bin",
            "mimeType": "application/pdf",
        }

    def test_resource_pretty_printed(self):
        text = render_resource(ResourceContent({"uri": "x", "text": "hi"}))
        assert text == '{\n  "uri": "x",\n  "text": "hi"\n}'

    def test_resource_between_text_keeps_order(self):
        result = ToolCallResult(
            content=[TextContent("a"), ResourceContent({"uri": "x"}), TextContent("b")]
        )
        body = ResultAssembler().assemble(result, False).model_text
        assert body == 'a\n\n{\n  "uri": "x"\n}\n\nb'


class TestImageAssembly:
    """Tests for image handling."""

    def test_images_returned_when_supported(self):
        result = ToolCallResult(content=[TextContent("chart"), PNG])
        assembled = ResultAssembler().assemble(result, supports_images=True)
        assert assembled.model_text == "chart"
        assert assembled.images == [PNG_URI]
        assert assembled.display_text == f"chart\n\n{PNG_URI}"

    def test_unsupported_images_noted_not_embedded(self):
        """Test two texts and one image for a model without image support."""
        result = ToolCallResult(content=[TextContent("a"), TextContent("b"), PNG])
        assembled = ResultAssembler().assemble(result, supports_images=False)
        assert assembled.images is None
        assert assembled.model_text.endswith(omitted_images_note(1))
        assert assembled.model_text.startswith("a\n\nb\n\n[1 images were provided")
        assert PNG_URI not in assembled.model_text
        assert assembled.display_text == f"a\n\nb\n\n{PNG_URI}"

    def test_images_only_skip_placeholder(self):
        result = ToolCallResult(content=[PNG, PNG])
        assembled = ResultAssembler().assemble(result, supports_images=False)
        assert assembled.model_text == omitted_images_note(2)
        assert assembled.display_text == f"{PNG_URI}\n\n{PNG_URI}"

    def test_data_uri(self):
        assert ImageContent("image/jpeg", "abc").to_data_uri() == "data:image/jpeg;base64,abc"
