"""Offline keyword-scoring language guess used when AI detection fails."""

from typing import Optional

from ..models.analysis import LanguageDetection

DEFAULT_LANGUAGE = "pt-BR"

LANGUAGE_NAMES = {
    "pt-BR": "Português (BR)",
    "en-US": "English (US)",
    "es-ES": "Español (ES)",
}

LANGUAGE_KEYWORDS = {
    "pt-BR": frozenset(['que', 'não', 'uma', 'para', 'com', 'está', 'tem', 'mais']),
    "en-US": frozenset(['the', 'and', 'is', 'to', 'it', 'you', 'that', 'this']),
    "es-ES": frozenset(['que', 'de', 'el', 'la', 'en', 'y', 'es', 'se']),
}

# Fixed per language, not derived from the score
HEURISTIC_CONFIDENCE = {
    "pt-BR": 0.85,
    "en-US": 0.82,
    "es-ES": 0.79,
}


def language_display_name(language_code: str) -> str:
    """Display name for a supported code; unsupported codes show the default."""
    return LANGUAGE_NAMES.get(language_code, LANGUAGE_NAMES[DEFAULT_LANGUAGE])


def detect_language_heuristic(text: str) -> Optional[LanguageDetection]:
    """Guess the language of text by counting keyword hits.

    Args:
        text: Text to score

    Returns:
        Detection for the single best-scoring language, or None when the top
        score is zero or shared by more than one language
    """
    words = text.lower().split()
    scores = {
        code: sum(1 for word in words if word in keywords)
        for code, keywords in LANGUAGE_KEYWORDS.items()
    }

    best_score = max(scores.values())
    leaders = [code for code, score in scores.items() if score == best_score]
    if best_score == 0 or len(leaders) > 1:
        return None

    code = leaders[0]
    return LanguageDetection(
        language=LANGUAGE_NAMES[code],
        confidence=HEURISTIC_CONFIDENCE[code],
        language_code=code,
    )
