"""HTTP handlers for sessions, analyses and AI operations under /api."""

import json
import logging
from typing import Any, Dict, Optional

from aiohttp import web
from pydantic import ValidationError

from .keys import AI_SERVICE_KEY, STORE_KEY
from .schemas import SessionCreate, SessionUpdate, AnalysisCreate
from ..ai.engine import AIProviderError
from ..storage.base import StorageError

logger = logging.getLogger(__name__)

routes = web.RouteTableDef()

SESSION_NOT_FOUND = "Sessão não encontrada"


def error_response(status: int, message: str) -> web.Response:
    return web.json_response({"message": message}, status=status)


@web.middleware
async def error_middleware(request: web.Request, handler) -> web.StreamResponse:
    """Turn unhandled exceptions into a JSON 500."""
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except Exception:
        logger.exception(f"Unhandled error on {request.method} {request.path}")
        return error_response(500, "Erro interno do servidor")


async def read_body(request: web.Request) -> Optional[Dict[str, Any]]:
    """Parse a JSON object body; None if the body is missing or not an object."""
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    return body if isinstance(body, dict) else None


def required_text(body: Optional[Dict[str, Any]], key: str) -> Optional[str]:
    if not body:
        return None
    value = body.get(key)
    return value if isinstance(value, str) and value else None


# ----------------------------------------------------------------------
# Sessions
# ----------------------------------------------------------------------

@routes.get("/api/sessions")
async def list_sessions(request: web.Request) -> web.Response:
    try:
        sessions = request.app[STORE_KEY].list_sessions()
    except StorageError as e:
        logger.error(f"Failed to list sessions: {e}")
        return error_response(500, "Falha ao buscar sessões")
    return web.json_response([s.to_dict() for s in sessions])


@routes.post("/api/sessions")
async def create_session(request: web.Request) -> web.Response:
    body = await read_body(request)
    try:
        payload = SessionCreate.model_validate(body)
    except ValidationError as e:
        logger.info(f"Rejected session payload: {e.error_count()} errors")
        return error_response(400, "Dados inválidos para criação da sessão")

    try:
        session = request.app[STORE_KEY].create_session(payload.model_dump())
    except StorageError as e:
        logger.error(f"Failed to create session: {e}")
        return error_response(500, "Falha ao criar sessão")
    return web.json_response(session.to_dict())


@routes.get("/api/sessions/{id}")
async def get_session(request: web.Request) -> web.Response:
    try:
        session = request.app[STORE_KEY].get_session(request.match_info["id"])
    except StorageError as e:
        logger.error(f"Failed to load session: {e}")
        return error_response(500, "Falha ao buscar sessão")
    if session is None:
        return error_response(404, SESSION_NOT_FOUND)
    return web.json_response(session.to_dict())


@routes.patch("/api/sessions/{id}")
async def update_session(request: web.Request) -> web.Response:
    body = await read_body(request)
    try:
        payload = SessionUpdate.model_validate(body)
    except ValidationError:
        return error_response(400, "Dados inválidos para atualização da sessão")

    try:
        session = request.app[STORE_KEY].update_session(request.match_info["id"], payload.changes())
    except StorageError as e:
        logger.error(f"Failed to update session: {e}")
        return error_response(500, "Falha ao atualizar sessão")
    if session is None:
        return error_response(404, SESSION_NOT_FOUND)
    return web.json_response(session.to_dict())


@routes.delete("/api/sessions/{id}")
async def delete_session(request: web.Request) -> web.Response:
    try:
        deleted = request.app[STORE_KEY].delete_session(request.match_info["id"])
    except StorageError as e:
        logger.error(f"Failed to delete session: {e}")
        return error_response(500, "Falha ao deletar sessão")
    if not deleted:
        return error_response(404, SESSION_NOT_FOUND)
    return web.json_response({"message": "Sessão deletada com sucesso"})


# ----------------------------------------------------------------------
# Analyses
# ----------------------------------------------------------------------

@routes.post("/api/analyses")
async def create_analysis(request: web.Request) -> web.Response:
    body = await read_body(request)
    try:
        payload = AnalysisCreate.model_validate(body)
        analysis = request.app[STORE_KEY].create_analysis(payload.model_dump())
    except (ValidationError, ValueError) as e:
        logger.info(f"Rejected analysis payload: {e}")
        return error_response(400, "Dados inválidos para análise")
    except StorageError as e:
        logger.error(f"Failed to save analysis: {e}")
        return error_response(500, "Falha ao salvar análise")
    return web.json_response(analysis.to_dict())


@routes.get("/api/sessions/{id}/analyses")
async def list_analyses(request: web.Request) -> web.Response:
    try:
        analyses = request.app[STORE_KEY].list_analyses(request.match_info["id"])
    except StorageError as e:
        logger.error(f"Failed to list analyses: {e}")
        return error_response(500, "Falha ao buscar análises")
    return web.json_response([a.to_dict() for a in analyses])


# ----------------------------------------------------------------------
# AI
# ----------------------------------------------------------------------

@routes.post("/api/ai/analyze")
async def analyze(request: web.Request) -> web.Response:
    body = await read_body(request)
    transcription = required_text(body, "transcription")
    question = required_text(body, "question")
    if not transcription or not question:
        return error_response(400, "Transcrição e pergunta são obrigatórias")

    try:
        analysis = await request.app[AI_SERVICE_KEY].analyze(transcription, question)
    except AIProviderError as e:
        return error_response(500, str(e) or "Falha na análise de IA")
    return web.json_response(analysis.to_dict())


@routes.post("/api/ai/summary")
async def summary(request: web.Request) -> web.Response:
    transcription = required_text(await read_body(request), "transcription")
    if not transcription:
        return error_response(400, "Transcrição é obrigatória")

    try:
        text = await request.app[AI_SERVICE_KEY].summarize(transcription)
    except AIProviderError as e:
        return error_response(500, str(e) or "Falha ao gerar resumo")
    return web.json_response({"summary": text})


@routes.post("/api/ai/detect-language")
async def detect_language(request: web.Request) -> web.Response:
    text = required_text(await read_body(request), "text")
    if not text:
        return error_response(400, "Texto é obrigatório")

    detection = await request.app[AI_SERVICE_KEY].detect_language(text)
    return web.json_response(detection.to_dict())


@routes.post("/api/ai/enhance")
async def enhance(request: web.Request) -> web.Response:
    body = await read_body(request)
    text = required_text(body, "text")
    if not text:
        return error_response(400, "Texto é obrigatório")

    target_language = required_text(body, "targetLanguage") or "pt-BR"
    enhancement = await request.app[AI_SERVICE_KEY].enhance_text(text, target_language)
    return web.json_response(enhancement.to_dict())


@routes.post("/api/ai/sentiment")
async def sentiment(request: web.Request) -> web.Response:
    text = required_text(await read_body(request), "text")
    if not text:
        return error_response(400, "Texto é obrigatório")

    result = await request.app[AI_SERVICE_KEY].analyze_sentiment(text)
    return web.json_response(result.to_dict())
