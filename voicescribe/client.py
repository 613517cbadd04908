"""aiohttp client for the VoiceScribe HTTP API.

The client offers the same detect_language/enhance_text coroutines as
AIService, so a RecognitionSession can enrich through a remote server.
"""

import logging
import aiohttp
from typing import Any, Dict, List, Optional

from .models.analysis import AnalysisResult, LanguageDetection, TextEnhancement, SentimentResult
from .models.session import StoredSession, StoredAnalysis

logger = logging.getLogger(__name__)


class VoiceScribeAPIError(Exception):
    """Non-success reply from the VoiceScribe API."""

    def __init__(self, status: int, message: str):
        super().__init__(f"{status}: {message}")
        self.status = status
        self.message = message


class VoiceScribeClient:
    """Async client for the /api endpoints."""

    def __init__(self, base_url: str, session: Optional[aiohttp.ClientSession] = None,
                 timeout_seconds: float = 60.0):
        """Initialize client.

        Args:
            base_url: Server root, e.g. 'http://127.0.0.1:5000'
            session: Existing aiohttp session to reuse; the client owns one otherwise
            timeout_seconds: Total timeout per request when the client owns the session
        """
        self.base_url = base_url.rstrip("/")
        self._session = session
        self._owns_session = session is None
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    async def __aenter__(self) -> "VoiceScribeClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    async def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{path}"
        async with self._get_session().request(method, url, json=payload) as response:
            try:
                body = await response.json()
            except (aiohttp.ContentTypeError, ValueError):
                body = None

            if response.status >= 400:
                message = body.get("message") if isinstance(body, dict) else await response.text()
                logger.debug(f"{method} {path} failed with {response.status}: {message}")
                raise VoiceScribeAPIError(response.status, message or response.reason or "")
            return body

    # AI operations

    async def analyze(self, transcription: str, question: str) -> AnalysisResult:
        data = await self._request("POST", "/api/ai/analyze", {"transcription": transcription, "question": question})
        return AnalysisResult.from_dict(data)

    async def summarize(self, transcription: str) -> str:
        data = await self._request("POST", "/api/ai/summary", {"transcription": transcription})
        return data["summary"]

    async def detect_language(self, text: str) -> LanguageDetection:
        data = await self._request("POST", "/api/ai/detect-language", {"text": text})
        return LanguageDetection.from_dict(data)

    async def enhance_text(self, text: str, target_language: Optional[str] = None) -> TextEnhancement:
        payload = {"text": text, "targetLanguage": target_language or "pt-BR"}
        data = await self._request("POST", "/api/ai/enhance", payload)
        return TextEnhancement.from_dict(data)

    async def analyze_sentiment(self, text: str) -> SentimentResult:
        data = await self._request("POST", "/api/ai/sentiment", {"text": text})
        return SentimentResult(rating=data["rating"], confidence=data["confidence"], sentiment=data["sentiment"])

    # Sessions and analyses

    async def list_sessions(self) -> List[StoredSession]:
        data = await self._request("GET", "/api/sessions")
        return [StoredSession.from_dict(item) for item in data]

    async def create_session(self, fields: Dict[str, Any]) -> StoredSession:
        return StoredSession.from_dict(await self._request("POST", "/api/sessions", fields))

    async def get_session(self, session_id: str) -> Optional[StoredSession]:
        """Fetch a session; None when the server reports it missing."""
        try:
            data = await self._request("GET", f"/api/sessions/{session_id}")
        except VoiceScribeAPIError as e:
            if e.status == 404:
                return None
            raise
        return StoredSession.from_dict(data)

    async def update_session(self, session_id: str, changes: Dict[str, Any]) -> Optional[StoredSession]:
        try:
            data = await self._request("PATCH", f"/api/sessions/{session_id}", changes)
        except VoiceScribeAPIError as e:
            if e.status == 404:
                return None
            raise
        return StoredSession.from_dict(data)

    async def delete_session(self, session_id: str) -> bool:
        try:
            await self._request("DELETE", f"/api/sessions/{session_id}")
        except VoiceScribeAPIError as e:
            if e.status == 404:
                return False
            raise
        return True

    async def create_analysis(self, fields: Dict[str, Any]) -> StoredAnalysis:
        return StoredAnalysis.from_dict(await self._request("POST", "/api/analyses", fields))

    async def list_analyses(self, session_id: str) -> List[StoredAnalysis]:
        data = await self._request("GET", f"/api/sessions/{session_id}/analyses")
        return [StoredAnalysis.from_dict(item) for item in data]
