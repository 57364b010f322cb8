"""
Tests for research workflow prompts.
"""

import pytest

from paper_shelf_server.prompts import PROMPTS, get_prompt, list_prompts


class TestPrompts:
    """Tests for prompt handlers."""

    @pytest.mark.asyncio
    async def test_list_prompts(self):
        prompts = await list_prompts()
        assert {p.name for p in prompts} == set(PROMPTS)
        assert {"research-chat", "literature-review"} <= set(PROMPTS)

    @pytest.mark.asyncio
    async def test_research_chat(self):
        result = await get_prompt("research-chat", {"list_id": "abc", "question": "What is new?"})

        text = result.messages[0].content.text
        assert 'list_id: "abc"' in text
        assert 'Start with this question: "What is new?"' in text

    @pytest.mark.asyncio
    async def test_literature_review_defaults(self):
        result = await get_prompt("literature-review", {"topic": "Protein folding", "citation_format": "MLA"})

        text = result.messages[0].content.text
        assert "## Literature Review: Protein folding" in text
        assert "10 most relevant papers" in text
        assert "`bibtex` format" in text

    @pytest.mark.asyncio
    async def test_missing_argument(self):
        with pytest.raises(ValueError, match="Missing required argument: topic"):
            await get_prompt("literature-review", {})

    @pytest.mark.asyncio
    async def test_unknown_prompt(self):
        with pytest.raises(ValueError, match="Prompt not found"):
            await get_prompt("deep-paper-analysis", {})
