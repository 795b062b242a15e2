from unittest.mock import MagicMock, patch

import pytest
import requests

from archgraph.generation.generator import (
    MAX_FILE_CHARS,
    ArchitectureGenerator,
    load_mock_architecture,
)
from archgraph.graph.errors import ExternalServiceError
from archgraph.inference.base import LLMClient
from archgraph.inference.chat_completions_client import ChatCompletionsClient
from archgraph.utils.json_extract import safe_load_json


class StubClient(LLMClient):
    def __init__(self, reply="", error=None):
        self.reply = reply
        self.error = error
        self.messages = []

    def generate(self, messages):
        self.messages.append(messages)
        if self.error:
            raise self.error
        return self.reply


def test_mock_mode_serves_bundled_architecture():
    generator = ArchitectureGenerator(client=StubClient(), ai_enabled=False)
    tree = generator.generate("anything", 2, "real")

    assert tree == load_mock_architecture()
    assert tree["children"]


def test_generate_parses_llm_json():
    client = StubClient(reply='Here you go: {"id": "shop", "title": "Shop", "children": []}')
    generator = ArchitectureGenerator(client=client, ai_enabled=True)

    tree = generator.generate("a shop", 3, "pseudocode")

    assert tree["id"] == "shop"
    user_prompt = client.messages[0][1]["content"]
    assert "a shop" in user_prompt
    assert "pseudocode" in user_prompt


def test_generate_validates_arguments():
    generator = ArchitectureGenerator(client=StubClient(), ai_enabled=True)
    with pytest.raises(ValueError):
        generator.generate("x", 5, "none")
    with pytest.raises(ValueError):
        generator.generate("x", 1, "assembly")


def test_unparseable_reply_is_service_error():
    generator = ArchitectureGenerator(client=StubClient(reply="sorry, no"), ai_enabled=True)
    with pytest.raises(ExternalServiceError):
        generator.generate("x", 1, "none")


def test_transport_failure_is_service_error():
    client = StubClient(error=requests.ConnectionError("refused"))
    generator = ArchitectureGenerator(client=client, ai_enabled=True)
    with pytest.raises(ExternalServiceError):
        generator.generate("x", 1, "none")


def test_analyze_truncates_file_content():
    client = StubClient(reply='{"id": "repo"}')
    generator = ArchitectureGenerator(client=client, ai_enabled=True)

    generator.analyze([{"path": "big.py", "content": "x" * (MAX_FILE_CHARS + 500)}])

    sent = client.messages[0][1]["content"]
    assert "### big.py" in sent
    assert "x" * (MAX_FILE_CHARS + 1) not in sent


def test_analyze_requires_files():
    with pytest.raises(ValueError):
        ArchitectureGenerator(client=StubClient(), ai_enabled=True).analyze([])


def test_offline_documentation_is_outline():
    generator = ArchitectureGenerator(client=StubClient(), ai_enabled=False)
    text = generator.document(
        {"title": "Shop", "description": "Sells things", "children": [{"title": "Cart"}]}
    )
    assert text.startswith("# Shop")
    assert "## Cart" in text


def test_safe_load_json():
    assert safe_load_json('{"a": 1}') == {"a": 1}
    assert safe_load_json('noise {"a": {"b": 2}} noise') == {"a": {"b": 2}}
    assert safe_load_json("[1, 2]") == {}
    assert safe_load_json("") == {}
    assert safe_load_json(None) == {}


def test_chat_completions_client_strips_fences():
    response = MagicMock()
    response.json.return_value = {
        "choices": [{"message": {"content": '```json\n{"id": "x"}\n```'}}]
    }

    with patch("archgraph.inference.chat_completions_client.requests.post", return_value=response) as post:
        client = ChatCompletionsClient(base_url="http://llm/v1/", model="m")
        text = client.generate([{"role": "user", "content": "hi"}])

    assert text == '{"id": "x"}'
    assert post.call_args.args[0] == "http://llm/v1/chat/completions"
    response.raise_for_status.assert_called_once()
