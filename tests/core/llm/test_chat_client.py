"""Tests for ChatClient."""

import aiohttp
import pytest
from aioresponses import aioresponses

from ragraph.core.graph import Message
from ragraph.core.llm import ChatClient, ChatClientConfig, UpstreamError

URL = "https://api.test.com/v1/chat/completions"


def completion(content: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


class TestChatClientConfig:
    """Tests for ChatClientConfig."""

    def test_default_values(self):
        """Config should have sensible defaults."""
        config = ChatClientConfig(api_key="test-key")

        assert config.model == "gpt-3.5-turbo"
        assert config.base_url == "https://api.openai.com/v1"
        assert config.max_retries == 3
        assert 429 in config.retryable_status_codes
        assert 401 not in config.retryable_status_codes

    def test_from_env(self, monkeypatch):
        """from_env reads the key, base url and model."""
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        monkeypatch.setenv("OPENAI_BASE_URL", "http://localhost:8080/v1")
        monkeypatch.setenv("RAGRAPH_MODEL", "local-model")

        config = ChatClientConfig.from_env()

        assert config.api_key == "sk-env"
        assert config.base_url == "http://localhost:8080/v1"
        assert config.model == "local-model"

    def test_from_env_overrides(self, monkeypatch):
        """Non-None overrides win over the environment."""
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        monkeypatch.setenv("RAGRAPH_MODEL", "local-model")

        config = ChatClientConfig.from_env(model="gpt-4o-mini", temperature=None)

        assert config.model == "gpt-4o-mini"
        assert config.temperature == 0.7

    def test_from_env_missing_key(self, monkeypatch):
        """A missing API key is a configuration error."""
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)

        with pytest.raises(ValueError, match="OPENAI_API_KEY is not set"):
            ChatClientConfig.from_env()


class TestChatClientComplete:
    """Tests for ChatClient.complete()."""

    @pytest.fixture
    def client_config(self):
        return ChatClientConfig(
            api_key="test-key",
            base_url="https://api.test.com/v1/",
            model="gpt-4",
            max_retries=2,
            retry_base_delay=0.01,
        )

    async def test_successful_request(self, client_config):
        """The first choice's content is returned."""
        with aioresponses() as m:
            m.post(URL, payload=completion("2"))

            async with ChatClient(client_config) as client:
                reply = await client.complete([Message.user("What is 1 + 1?")])

        assert reply == "2"

    async def test_request_body(self, client_config):
        """Messages are sent in the chat wire format."""
        with aioresponses() as m:
            m.post(URL, payload=completion("ok"))

            async with ChatClient(client_config) as client:
                await client.complete([Message.system("be brief"), Message.user("hi")])

            call = next(iter(m.requests.values()))[0]

        assert call.kwargs["json"] == {
            "model": "gpt-4",
            "messages": [
                {"role": "system", "content": "be brief"},
                {"role": "user", "content": "hi"},
            ],
            "temperature": 0.7,
        }

    async def test_retry_on_429(self, client_config):
        """Rate limits are retried."""
        with aioresponses() as m:
            m.post(URL, status=429, body="Rate limited")
            m.post(URL, payload=completion("OK"))

            async with ChatClient(client_config) as client:
                reply = await client.complete([Message.user("hi")])

        assert reply == "OK"

    async def test_retries_exhausted(self, client_config):
        """The last error is raised once retries run out."""
        with aioresponses() as m:
            for _ in range(3):
                m.post(URL, status=503, body="Unavailable")

            async with ChatClient(client_config) as client:
                with pytest.raises(UpstreamError) as exc_info:
                    await client.complete([Message.user("hi")])

        assert exc_info.value.status_code == 503

    async def test_retry_on_connection_error(self, client_config):
        """Connection errors are retried."""
        with aioresponses() as m:
            m.post(URL, exception=aiohttp.ClientConnectionError("reset"))
            m.post(URL, payload=completion("back"))

            async with ChatClient(client_config) as client:
                reply = await client.complete([Message.user("hi")])

        assert reply == "back"

    async def test_non_retryable_error(self, client_config):
        """Non-retryable errors should raise immediately."""
        with aioresponses() as m:
            m.post(URL, status=401, body="Unauthorized")

            async with ChatClient(client_config) as client:
                with pytest.raises(UpstreamError) as exc_info:
                    await client.complete([Message.user("hi")])

        assert exc_info.value.status_code == 401
        assert exc_info.value.response_body == "Unauthorized"

    async def test_malformed_response(self, client_config):
        """A body without choices is an upstream error."""
        with aioresponses() as m:
            m.post(URL, payload={"choices": []})

            async with ChatClient(client_config) as client:
                with pytest.raises(UpstreamError, match="Malformed"):
                    await client.complete([Message.user("hi")])

    async def test_client_not_connected_raises(self, client_config):
        """Sending without connecting should raise RuntimeError."""
        client = ChatClient(client_config)

        with pytest.raises(RuntimeError, match="not connected"):
            await client.complete([Message.user("hi")])
