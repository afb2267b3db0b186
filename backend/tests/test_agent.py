"""Tests for the build pipeline."""

import json

import pytest

from pagewright.agent import process_instruction, select_mode
from pagewright.generator import GenerationError


@pytest.mark.parametrize(
    "html, expected",
    [
        ("", "generate"),
        (None, "generate"),
        ("   \n\t", "generate"),
        ("<html></html>", "edit"),
    ],
)
def test_select_mode(html, expected):
    assert select_mode(html) == expected


class TestProcessInstruction:
    @pytest.mark.asyncio
    async def test_edit_mode_applies_patch(self, sample_html, fake_client):
        ops = {
            "ops": [
                {
                    "op": "replace",
                    "target": "<h1>Welcome to Launchpad</h1>",
                    "value": "<h1>Launch</h1>",
                }
            ]
        }
        client = fake_client(json.dumps(ops))

        result = await process_instruction(
            "change the title to Launch", sample_html, client=client
        )

        assert result.mode == "edit"
        assert result.intent == "micro"
        assert result.edits_applied == 1
        assert "<h1>Launch</h1>" in result.html
        assert "Welcome to Launchpad</h1>" not in result.html
        assert result.message == "Quick edit complete · 1 changes applied"

    @pytest.mark.asyncio
    async def test_edit_prompt_carries_style_hints(self, sample_html, fake_client):
        client = fake_client('{"ops": []}')

        await process_instruction("make it feel more premium", sample_html, client=client)

        user_prompt = client.chat.completions.create.await_args.kwargs["messages"][1]["content"]
        assert "STYLE CONSISTENCY REQUIREMENTS" in user_prompt
        assert "Continue using the Inter font family" in user_prompt

    @pytest.mark.asyncio
    async def test_failed_edit_leaves_document_unchanged(self, sample_html, fake_client):
        client = fake_client("not json at all")

        result = await process_instruction("translate this to Turkish", sample_html, client=client)

        assert result.html == sample_html
        assert result.intent == "semantic"
        assert result.edits_applied == 0
        assert result.message == "Semantic update complete · 0 changes applied"

    @pytest.mark.asyncio
    async def test_generate_mode_builds_new_page(self, fake_client):
        page = "<!DOCTYPE html>\n<html>\n<body>\n<h1>Cafe</h1>\n</body>\n</html>"
        client = fake_client(f"```html\n{page}\n```")

        result = await process_instruction("a page for my cafe", "", client=client)

        assert result.mode == "generate"
        assert result.html == page
        assert result.intent is None
        assert result.message == "Built · 6 lines"

    @pytest.mark.asyncio
    async def test_generate_mode_propagates_generation_error(self, fake_client):
        with pytest.raises(GenerationError):
            await process_instruction("a page", "  ", client=fake_client("no html here"))
