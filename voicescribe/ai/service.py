"""AI enrichment operations over transcripts.

Each operation validates its input, asks the completion engine for a reply,
parses the JSON payload, clamps confidences into [0, 1] and fills absent
fields with fixed fallbacks. Language detection, enhancement and sentiment
never raise on model failure; analysis and summary raise AIProviderError
because there is no sensible default answer to a user's question.
"""

import json
import math
import logging
from typing import Any, Dict, List, Optional

from .engine import AIProviderError, CompletionEngine
from ..models.analysis import AnalysisResult, LanguageDetection, TextEnhancement, SentimentResult

logger = logging.getLogger(__name__)


ANALYSIS_FALLBACK_ANSWER = "Não foi possível gerar uma resposta baseada no conteúdo transcrito."
SUMMARY_FALLBACK = "Não foi possível gerar um resumo."
UNKNOWN_LANGUAGE = "Não identificado"
UNKNOWN_LANGUAGE_CODE = "unknown"

ANALYZE_SYSTEM_PROMPT = (
    "You are an AI assistant specialized in analyzing transcribed content. You will receive "
    "a transcription and a question about it. Provide accurate, helpful answers based strictly "
    "on the content provided. Respond with JSON in this format: "
    '{ "answer": "your detailed answer", "confidence": number between 0 and 1, '
    '"relatedTopics": ["topic1", "topic2"] }'
)

SUMMARY_SYSTEM_PROMPT = (
    "Você é um assistente especializado em criar resumos concisos e informativos. "
    "Crie um resumo dos pontos principais do texto fornecido, mantendo as informações "
    "mais importantes."
)

DETECT_SYSTEM_PROMPT = (
    "Detect the language of the provided text. Respond with JSON in this format: "
    '{ "language": "language name in Portuguese", "confidence": number between 0 and 1, '
    '"languageCode": "ISO code like pt-BR, en-US, es-ES" }'
)

ENHANCE_SYSTEM_PROMPT = """You are a transcription enhancement AI. Your job is to:
1. Correct grammar and spelling errors in transcribed text
2. Add proper punctuation
3. Maintain the original meaning and style
4. Respond in {target_language}

Format your response as JSON: {{
  "enhancedText": "corrected text",
  "corrections": ["list of corrections made"],
  "confidence": number between 0 and 1
}}"""

SENTIMENT_SYSTEM_PROMPT = (
    "Você é um especialista em análise de sentimento. Analise o sentimento do texto e forneça "
    "uma avaliação de 1 a 5 estrelas e uma pontuação de confiança entre 0 e 1. "
    'Sentimentos possíveis: "positivo", "negativo", "neutro". '
    'Responda com JSON: { "rating": number, "confidence": number, "sentiment": string }'
)


def clamp_confidence(value: Any, default: float) -> float:
    """Clamp a model-reported confidence into [0, 1].

    Missing, boolean, non-numeric, NaN and overflowing values fall back to ``default``.
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if math.isnan(number):
        return default
    return max(0.0, min(1.0, number))


def parse_json_reply(raw: str) -> Dict[str, Any]:
    """Parse a model reply that should hold a JSON object.

    Markdown code fences around the payload are stripped first.

    Raises:
        ValueError: If the reply is not a JSON object
    """
    text = (raw or "").strip()
    if text.startswith("```"):
        text = text.strip("`")
        if text.lower().startswith("json"):
            text = text[4:]
        text = text.strip()
    if not text:
        raise ValueError("Empty model reply")

    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None]


def _text_field(value: Any, fallback: str) -> str:
    if isinstance(value, str) and value.strip():
        return value
    return fallback


class AIService:
    """AI enrichment client used by the HTTP API and the live session."""

    def __init__(self, engine: CompletionEngine):
        """Initialize AI service.

        Args:
            engine: Completion engine that implements the CompletionEngine protocol
        """
        self.engine = engine
        logger.info(f"AIService initialized with engine: {type(engine).__name__}")

    async def analyze(self, transcription: str, question: str) -> AnalysisResult:
        """Answer a question about a transcription.

        Raises:
            ValueError: If transcription or question is empty
            AIProviderError: If the model call fails or the reply is not JSON
        """
        if not transcription or not question:
            raise ValueError("Transcrição e pergunta são obrigatórias")

        prompt = f'Transcription: "{transcription}"\n\nQuestion: "{question}"'
        try:
            raw = await self.engine.send_prompt(prompt, system_prompt=ANALYZE_SYSTEM_PROMPT, json_mode=True)
            data = parse_json_reply(raw)
        except (AIProviderError, ValueError) as e:
            logger.error(f"Analysis failed: {e}")
            raise AIProviderError(f"Falha ao analisar conteúdo: {e}") from e

        return AnalysisResult(
            answer=_text_field(data.get("answer"), ANALYSIS_FALLBACK_ANSWER),
            confidence=clamp_confidence(data.get("confidence"), 0.5),
            related_topics=_string_list(data.get("relatedTopics")),
        )

    async def summarize(self, transcription: str) -> str:
        """Summarize a transcription.

        Raises:
            ValueError: If transcription is empty
            AIProviderError: If the model call fails
        """
        if not transcription:
            raise ValueError("Transcrição é obrigatória")

        prompt = f"Por favor, crie um resumo conciso do seguinte texto transcrito:\n\n{transcription}"
        try:
            summary = await self.engine.send_prompt(prompt, system_prompt=SUMMARY_SYSTEM_PROMPT)
        except AIProviderError as e:
            logger.error(f"Summary failed: {e}")
            raise AIProviderError(f"Falha ao gerar resumo: {e}") from e

        return summary or SUMMARY_FALLBACK

    async def detect_language(self, text: str) -> LanguageDetection:
        """Detect the language of text; degrades to an 'unknown' detection.

        Raises:
            ValueError: If text is empty
        """
        if not text:
            raise ValueError("Texto é obrigatório")

        try:
            raw = await self.engine.send_prompt(text, system_prompt=DETECT_SYSTEM_PROMPT, json_mode=True)
            data = parse_json_reply(raw)
        except (AIProviderError, ValueError) as e:
            logger.warning(f"Language detection failed, returning default: {e}")
            return LanguageDetection(
                language=UNKNOWN_LANGUAGE,
                confidence=0.0,
                language_code=UNKNOWN_LANGUAGE_CODE,
            )

        return LanguageDetection(
            language=_text_field(data.get("language"), UNKNOWN_LANGUAGE),
            confidence=clamp_confidence(data.get("confidence"), 0.5),
            language_code=_text_field(data.get("languageCode"), UNKNOWN_LANGUAGE_CODE),
        )

    async def enhance_text(self, text: str, target_language: Optional[str] = None) -> TextEnhancement:
        """Correct grammar and punctuation; degrades to the unchanged text.

        Raises:
            ValueError: If text is empty
        """
        if not text:
            raise ValueError("Texto é obrigatório")
        target_language = target_language or "pt-BR"

        system_prompt = ENHANCE_SYSTEM_PROMPT.format(target_language=target_language)
        try:
            raw = await self.engine.send_prompt(
                f'Please enhance this transcribed text: "{text}"',
                system_prompt=system_prompt,
                json_mode=True,
            )
            data = parse_json_reply(raw)
        except (AIProviderError, ValueError) as e:
            logger.warning(f"Enhancement failed, keeping original text: {e}")
            return TextEnhancement(enhanced_text=text, corrections=[], confidence=0.5)

        return TextEnhancement(
            enhanced_text=_text_field(data.get("enhancedText"), text),
            corrections=_string_list(data.get("corrections")),
            confidence=clamp_confidence(data.get("confidence"), 0.8),
        )

    async def analyze_sentiment(self, text: str) -> SentimentResult:
        """Rate the sentiment of text from 1 to 5; degrades to neutral.

        Raises:
            ValueError: If text is empty
        """
        if not text:
            raise ValueError("Texto é obrigatório")

        try:
            raw = await self.engine.send_prompt(
                f'Analise o sentimento deste texto: "{text}"',
                system_prompt=SENTIMENT_SYSTEM_PROMPT,
                json_mode=True,
            )
            data = parse_json_reply(raw)
        except (AIProviderError, ValueError) as e:
            logger.warning(f"Sentiment analysis failed, returning neutral: {e}")
            return SentimentResult(rating=3, confidence=0.5, sentiment="neutro")

        rating = data.get("rating")
        if isinstance(rating, bool) or not isinstance(rating, (int, float)):
            rating = 3
        elif isinstance(rating, float) and not math.isfinite(rating):
            rating = 3
        return SentimentResult(
            rating=max(1, min(5, int(round(rating)))),
            confidence=clamp_confidence(data.get("confidence"), 0.5),
            sentiment=_text_field(data.get("sentiment"), "neutro"),
        )
