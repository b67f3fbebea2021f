# tests/services/test_llm_client.py
"""Tests for JSON extraction from model replies and client construction."""

import json
from unittest.mock import AsyncMock, Mock

import pytest

from leadgen.config import Settings
from leadgen.services.llm_client import LLMClient, create_llm_client, extract_json


@pytest.mark.unit
class TestExtractJson:

    def test_plain_object(self):
        assert json.loads(extract_json('{"a": 1}')) == {"a": 1}

    def test_fenced_block_with_prose(self):
        text = 'Sure! Here you go:\n```json\n{"suggestions": [{"content": "x"}]}\n```\nEnjoy.'
        assert json.loads(extract_json(text)) == {"suggestions": [{"content": "x"}]}

    def test_array_before_object(self):
        assert json.loads(extract_json('result: [{"a": 1}, {"b": 2}] trailing {')) == [{"a": 1}, {"b": 2}]

    def test_braces_inside_strings(self):
        text = '{"content": "use {curly} and ] here", "n": 2}'
        assert json.loads(extract_json(text)) == {"content": "use {curly} and ] here", "n": 2}

    @pytest.mark.parametrize("text", [None, "", "no json here", '{"open": true'])
    def test_nothing_found(self, text):
        assert extract_json(text) is None


@pytest.mark.unit
class TestCreateLLMClient:

    def test_none_without_key(self):
        assert create_llm_client(Settings(OPENAI_API_KEY=None)) is None

    def test_uses_configured_models(self):
        client = create_llm_client(Settings(OPENAI_API_KEY="sk-test", OPENAI_MODEL="m1", OPENAI_IMAGE_MODEL="m2"))
        assert isinstance(client, LLMClient)
        assert client.model == "m1"
        assert client.image_model == "m2"


# ============================================================================
# SDK CALLS
# ============================================================================

@pytest.fixture
def llm():
    client = LLMClient(api_key="sk-test", model="m1", image_model="m2")
    client._client = Mock()
    return client


@pytest.mark.asyncio
class TestLLMClient:

    async def test_complete_messages(self, llm):
        llm._client.chat.completions.create = AsyncMock(
            return_value=Mock(choices=[Mock(message=Mock(content="  hello  "))])
        )

        assert await llm.complete("be brief", "say hi") == "hello"

        kwargs = llm._client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "m1"
        assert kwargs["messages"] == [
            {"role": "system", "content": "be brief"},
            {"role": "user", "content": "say hi"},
        ]

    async def test_complete_without_system_prompt(self, llm):
        llm._client.chat.completions.create = AsyncMock(return_value=Mock(choices=[]))

        assert await llm.complete(None, "say hi") == ""
        assert llm._client.chat.completions.create.call_args.kwargs["messages"] == [
            {"role": "user", "content": "say hi"}
        ]

    async def test_generate_image(self, llm):
        llm._client.images.generate = AsyncMock(return_value=Mock(data=[Mock(url="https://img/1.png")]))

        assert await llm.generate_image("a desk") == "https://img/1.png"
        kwargs = llm._client.images.generate.call_args.kwargs
        assert kwargs["model"] == "m2"
        assert kwargs["size"] == "1024x1024"

    async def test_generate_image_without_data(self, llm):
        llm._client.images.generate = AsyncMock(return_value=Mock(data=[]))
        assert await llm.generate_image("a desk") is None
