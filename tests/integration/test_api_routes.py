"""Integration tests for the /api HTTP endpoints."""

from unittest.mock import Mock

import pytest

from voicescribe.ai import AIService, AIProviderError
from voicescribe.api import create_app
from voicescribe.storage import MemorySessionStore, StorageError

MISSING_ID = "00000000-0000-0000-0000-000000000000"


@pytest.fixture
async def client(aiohttp_client, test_config, fake_engine):
    app = create_app(test_config, AIService(fake_engine), MemorySessionStore())
    return await aiohttp_client(app)


async def create_session(client, **fields):
    payload = {"title": "Reunião", **fields}
    response = await client.post("/api/sessions", json=payload)
    assert response.status == 200
    return await response.json()


@pytest.mark.integration
class TestAIEndpoints:
    """Test cases for /api/ai/*."""

    async def test_analyze(self, client, fake_engine):
        """Test analyze."""
        fake_engine.replies.append({"answer": "Sobre orçamento", "confidence": 0.8, "relatedTopics": ["finanças"]})

        response = await client.post("/api/ai/analyze", json={"transcription": "texto", "question": "Tema?"})

        assert response.status == 200
        assert await response.json() == {
            "answer": "Sobre orçamento",
            "confidence": 0.8,
            "relatedTopics": ["finanças"],
        }

    async def test_analyze_missing_question(self, client, fake_engine):
        """Test analyze missing question."""
        response = await client.post("/api/ai/analyze", json={"transcription": "texto"})

        assert response.status == 400
        assert (await response.json())["message"] == "Transcrição e pergunta são obrigatórias"
        assert fake_engine.calls == []

    async def test_analyze_provider_failure(self, client, fake_engine):
        """Test analyze provider failure."""
        fake_engine.replies.append(AIProviderError("quota"))

        response = await client.post("/api/ai/analyze", json={"transcription": "t", "question": "q"})

        assert response.status == 500
        assert "Falha ao analisar conteúdo" in (await response.json())["message"]

    async def test_invalid_json_body(self, client):
        """Test invalid JSON body."""
        response = await client.post("/api/ai/analyze", data="{not json", headers={"Content-Type": "application/json"})
        assert response.status == 400

    async def test_summary(self, client, fake_engine):
        """Test summary."""
        fake_engine.replies.append("Resumo")

        response = await client.post("/api/ai/summary", json={"transcription": "texto"})

        assert response.status == 200
        assert await response.json() == {"summary": "Resumo"}

    async def test_summary_requires_transcription(self, client):
        """Test summary requires transcription."""
        response = await client.post("/api/ai/summary", json={})
        assert response.status == 400
        assert (await response.json())["message"] == "Transcrição é obrigatória"

    async def test_detect_language_degrades(self, client, fake_engine):
        """Test detect language degrades."""
        fake_engine.replies.append(AIProviderError("down"))

        response = await client.post("/api/ai/detect-language", json={"text": "hello"})

        assert response.status == 200
        assert await response.json() == {"language": "Não identificado", "confidence": 0.0, "languageCode": "unknown"}

    async def test_enhance_default_target(self, client, fake_engine):
        """Test enhance default target."""
        fake_engine.replies.append({"enhancedText": "Olá.", "corrections": [], "confidence": 0.9})

        response = await client.post("/api/ai/enhance", json={"text": "ola"})

        assert response.status == 200
        assert (await response.json())["enhancedText"] == "Olá."
        assert "pt-BR" in fake_engine.calls[0]["system_prompt"]

    async def test_enhance_requires_text(self, client):
        """Test enhance requires text."""
        response = await client.post("/api/ai/enhance", json={"text": ""})
        assert response.status == 400
        assert (await response.json())["message"] == "Texto é obrigatório"

    async def test_sentiment(self, client, fake_engine):
        """Test sentiment."""
        fake_engine.replies.append({"rating": 4, "confidence": 0.7, "sentiment": "positivo"})

        response = await client.post("/api/ai/sentiment", json={"text": "gostei"})

        assert await response.json() == {"rating": 4, "confidence": 0.7, "sentiment": "positivo"}


@pytest.mark.integration
class TestSessionEndpoints:
    """Test cases for /api/sessions and /api/analyses."""

    async def test_session_crud(self, client):
        """Test session CRUD."""
        created = await create_session(client, transcript="olá", durationSeconds=30, wordCount=1)
        assert created["durationSeconds"] == 30
        assert created["language"] == "pt-BR"

        listing = await (await client.get("/api/sessions")).json()
        assert [s["id"] for s in listing] == [created["id"]]

        fetched = await (await client.get(f"/api/sessions/{created['id']}")).json()
        assert fetched == created

        response = await client.patch(f"/api/sessions/{created['id']}", json={"title": "Nova"})
        assert response.status == 200
        assert (await response.json())["title"] == "Nova"

        response = await client.delete(f"/api/sessions/{created['id']}")
        assert response.status == 200
        assert (await response.json())["message"] == "Sessão deletada com sucesso"

    async def test_create_session_invalid(self, client):
        """Test create session invalid."""
        response = await client.post("/api/sessions", json={"transcript": "sem título"})

        assert response.status == 400
        assert (await response.json())["message"] == "Dados inválidos para criação da sessão"

    async def test_create_session_rejects_unknown_field(self, client):
        """Test create session rejects unknown field."""
        response = await client.post("/api/sessions", json={"title": "t", "color": "red"})
        assert response.status == 400

    async def test_get_missing_session(self, client):
        """Test get missing session."""
        response = await client.get(f"/api/sessions/{MISSING_ID}")

        assert response.status == 404
        assert (await response.json())["message"] == "Sessão não encontrada"

    async def test_delete_missing_session(self, client):
        """Test delete missing session."""
        response = await client.delete(f"/api/sessions/{MISSING_ID}")

        assert response.status == 404
        assert (await response.json())["message"] == "Sessão não encontrada"

    async def test_update_invalid(self, client):
        """Test update invalid."""
        created = await create_session(client)

        response = await client.patch(f"/api/sessions/{created['id']}", json={"wordCount": -1})

        assert response.status == 400

    async def test_update_missing_session(self, client):
        """Test update missing session."""
        response = await client.patch(f"/api/sessions/{MISSING_ID}", json={"title": "x"})
        assert response.status == 404

    async def test_analyses(self, client):
        """Test analyses."""
        session = await create_session(client)
        payload = {"sessionId": session["id"], "question": "Tema?", "answer": "Vendas", "relatedTopics": ["metas"]}

        response = await client.post("/api/analyses", json=payload)
        assert response.status == 200
        saved = await response.json()
        assert saved["sessionId"] == session["id"]
        assert saved["confidence"] == 0.5

        listing = await (await client.get(f"/api/sessions/{session['id']}/analyses")).json()
        assert [a["id"] for a in listing] == [saved["id"]]

    async def test_analysis_without_session(self, client):
        """Test analysis without session."""
        response = await client.post("/api/analyses", json={"sessionId": None, "question": "q", "answer": "a"})

        assert response.status == 200
        assert (await response.json())["sessionId"] is None

    async def test_analysis_for_unknown_session(self, client):
        """Test analysis for unknown session."""
        response = await client.post("/api/analyses", json={"sessionId": MISSING_ID, "question": "q", "answer": "a"})

        assert response.status == 400
        assert (await response.json())["message"] == "Dados inválidos para análise"

    async def test_analysis_confidence_out_of_range(self, client):
        """Test analysis confidence out of range."""
        response = await client.post("/api/analyses", json={"question": "q", "answer": "a", "confidence": 2})
        assert response.status == 400

    async def test_delete_cascades(self, client):
        """Test delete cascades."""
        session = await create_session(client)
        await client.post("/api/analyses", json={"sessionId": session["id"], "question": "q", "answer": "a"})

        await client.delete(f"/api/sessions/{session['id']}")

        listing = await (await client.get(f"/api/sessions/{session['id']}/analyses")).json()
        assert listing == []


@pytest.mark.integration
class TestErrorHandling:
    """Test cases for storage failures and unexpected errors."""

    @pytest.fixture
    async def broken_store_client(self, aiohttp_client, test_config, fake_engine):
        store = Mock(spec=MemorySessionStore)
        app = create_app(test_config, AIService(fake_engine), store)
        return store, await aiohttp_client(app)

    async def test_storage_error(self, broken_store_client):
        """Test storage error."""
        store, client = broken_store_client
        store.list_sessions.side_effect = StorageError("disk gone")

        response = await client.get("/api/sessions")

        assert response.status == 500
        assert (await response.json())["message"] == "Falha ao buscar sessões"

    async def test_unexpected_error(self, broken_store_client):
        """Test unexpected error."""
        store, client = broken_store_client
        store.get_session.side_effect = RuntimeError("bug")

        response = await client.get(f"/api/sessions/{MISSING_ID}")

        assert response.status == 500
        assert (await response.json())["message"] == "Erro interno do servidor"

    async def test_unknown_route_stays_404(self, client):
        """Test unknown route stays 404."""
        response = await client.get("/api/nothing-here")
        assert response.status == 404
