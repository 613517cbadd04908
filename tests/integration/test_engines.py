"""Integration tests for the completion engines against stub providers."""

import pytest
from aiohttp import web

from voicescribe.ai import AIProviderError, AIService, ChatGPTEngine, GeminiEngine, create_ai_service
from voicescribe.config import VoiceScribeConfig


@pytest.fixture
def captured():
    return {}


@pytest.fixture
async def openai_stub(aiohttp_server, captured):
    async def completions(request: web.Request) -> web.Response:
        captured["headers"] = dict(request.headers)
        captured["body"] = await request.json()
        if captured["body"]["messages"][-1]["content"] == "fail":
            return web.Response(status=429, text="rate limited")
        if "garbled" in captured["body"]["messages"][-1]["content"]:
            return web.Response(status=200, text="{not json", content_type="application/json")
        return web.json_response({"choices": [{"message": {"content": "  resposta  "}}]})

    app = web.Application()
    app.router.add_post("/v1/chat/completions", completions)
    return await aiohttp_server(app)


@pytest.fixture
async def gemini_stub(aiohttp_server, captured):
    async def generate(request: web.Request) -> web.Response:
        captured["path"] = request.match_info["tail"]
        captured["headers"] = dict(request.headers)
        captured["body"] = await request.json()
        if captured["body"]["contents"][0]["parts"][0]["text"] == "empty":
            return web.json_response({"candidates": []})
        if captured["body"]["contents"][0]["parts"][0]["text"] == "garbled":
            return web.Response(status=200, text="{not json", content_type="application/json")
        return web.json_response({"candidates": [{"content": {"parts": [{"text": '{"a": '}, {"text": "1}"}]}}]})

    app = web.Application()
    app.router.add_post("/v1beta/models/{tail}", generate)
    return await aiohttp_server(app)


@pytest.mark.integration
class TestChatGPTEngine:
    """Test cases for the OpenAI chat completions engine."""

    async def test_send_prompt(self, openai_stub, captured):
        """Test send prompt."""
        engine = ChatGPTEngine("sk-test", base_url=str(openai_stub.make_url("/v1/chat/completions")))

        reply = await engine.send_prompt("olá", system_prompt="seja breve", json_mode=True, temperature=0.2)

        assert reply == "resposta"
        assert captured["headers"]["Authorization"] == "Bearer sk-test"
        assert captured["body"]["model"] == "gpt-4"
        assert captured["body"]["messages"][0] == {"role": "system", "content": "seja breve"}
        assert captured["body"]["response_format"] == {"type": "json_object"}
        assert captured["body"]["temperature"] == 0.2

    async def test_error_status(self, openai_stub):
        """Test error status."""
        engine = ChatGPTEngine("sk-test", base_url=str(openai_stub.make_url("/v1/chat/completions")))

        with pytest.raises(AIProviderError, match="429"):
            await engine.send_prompt("fail")

    async def test_invalid_json_body(self, openai_stub):
        """Test a 200 reply that is not JSON becomes a provider error."""
        engine = ChatGPTEngine("sk-test", base_url=str(openai_stub.make_url("/v1/chat/completions")))

        with pytest.raises(AIProviderError, match="invalid JSON"):
            await engine.send_prompt("garbled")

    async def test_invalid_json_body_fails_summary(self, openai_stub):
        """Test summaries report a provider failure for an unparseable reply."""
        engine = ChatGPTEngine("sk-test", base_url=str(openai_stub.make_url("/v1/chat/completions")))

        with pytest.raises(AIProviderError, match="Falha ao gerar resumo"):
            await AIService(engine).summarize("garbled transcript")

    async def test_connection_failure(self, unused_tcp_port):
        """Test connection failure."""
        engine = ChatGPTEngine("sk-test", base_url=f"http://127.0.0.1:{unused_tcp_port}/v1/chat/completions")

        with pytest.raises(AIProviderError):
            await engine.send_prompt("olá")


@pytest.mark.integration
class TestGeminiEngine:
    """Test cases for the Gemini generateContent engine."""

    async def test_send_prompt(self, gemini_stub, captured):
        """Test send prompt."""
        engine = GeminiEngine("g-test", model="test-model", base_url=str(gemini_stub.make_url("/v1beta")))

        reply = await engine.send_prompt("olá", system_prompt="seja breve", json_mode=True)

        assert reply == '{"a": 1}'
        assert captured["path"] == "test-model:generateContent"
        assert captured["headers"]["x-goog-api-key"] == "g-test"
        assert captured["body"]["systemInstruction"] == {"parts": [{"text": "seja breve"}]}
        assert captured["body"]["generationConfig"]["responseMimeType"] == "application/json"

    async def test_empty_reply(self, gemini_stub):
        """Test empty reply."""
        engine = GeminiEngine("g-test", base_url=str(gemini_stub.make_url("/v1beta")))

        with pytest.raises(AIProviderError, match="Resposta vazia do modelo"):
            await engine.send_prompt("empty")

    async def test_invalid_json_body(self, gemini_stub):
        """Test a 200 reply that is not JSON becomes a provider error."""
        engine = GeminiEngine("g-test", base_url=str(gemini_stub.make_url("/v1beta")))

        with pytest.raises(AIProviderError, match="invalid JSON"):
            await engine.send_prompt("garbled")


@pytest.mark.integration
class TestProviderSelection:
    """Test cases for create_ai_service."""

    def test_gemini_provider(self):
        """Test Gemini provider."""
        config = VoiceScribeConfig(overrides={"ai": {"provider": "gemini", "gemini": {"api_key": "g"}}})
        assert isinstance(create_ai_service(config).engine, GeminiEngine)

    def test_openai_provider(self):
        """Test OpenAI provider."""
        config = VoiceScribeConfig(overrides={"ai": {"openai": {"api_key": "sk", "model": "gpt-4o"}}})
        engine = create_ai_service(config).engine

        assert isinstance(engine, ChatGPTEngine)
        assert engine.model == "gpt-4o"
