"""Unit tests for model serialization."""

from datetime import datetime

import pytest

from voicescribe.models import (
    StoredSession,
    StoredAnalysis,
    RecognitionEvent,
    SessionSnapshot,
)


@pytest.mark.unit
class TestModels:
    """Test cases for wire-format dictionaries."""

    def test_session_to_dict_uses_camel_case(self):
        """Test session to dict uses camel case."""
        created = datetime(2024, 1, 2, 3, 4, 5)
        session = StoredSession(id="s1", title="t", duration_seconds=10, word_count=3,
                                created_at=created, updated_at=created)

        data = session.to_dict()

        assert data["durationSeconds"] == 10
        assert data["wordCount"] == 3
        assert data["createdAt"] == "2024-01-02T03:04:05"
        assert StoredSession.from_dict(data) == session

    def test_analysis_nullable_session(self):
        """Test analysis nullable session."""
        analysis = StoredAnalysis(id="a1", session_id=None, question="q", answer="a")
        data = analysis.to_dict()

        assert data["sessionId"] is None
        assert StoredAnalysis.from_dict(data).session_id is None

    def test_recognition_event_from_browser_payload(self):
        """Test recognition event from browser payload."""
        event = RecognitionEvent.from_dict({
            "resultIndex": 2,
            "results": [{"transcript": "a", "isFinal": True}, {"transcript": "b"}],
        })

        assert event.result_index == 2
        assert [r.is_final for r in event.results] == [True, False]
        assert event.results[0].confidence is None

    def test_snapshot_derived_fields(self):
        """Test snapshot derived fields."""
        snapshot = SessionSnapshot(
            is_recording=True,
            transcript="olá ",
            interim_text="mun",
            current_language="pt-BR",
            detected_language="Português (BR)",
            confidence=0.98,
            enhanced_mode=True,
            detected_languages=("pt-BR", "en-US"),
            word_count=2,
            recording_time_seconds=5,
            audio_level_percent=12.5,
            version=1,
        )

        data = snapshot.to_dict()

        assert data["displayText"] == "olá mun"
        assert data["languageCount"] == 2
        assert data["detectedLanguages"] == ["pt-BR", "en-US"]
        assert data["recordingTime"] == 5

    @pytest.mark.parametrize("payload", [
        {"resultIndex": None, "results": []},
        {"resultIndex": "1", "results": []},
        {"resultIndex": -1, "results": []},
        {"results": ["olá"]},
        {"results": {"transcript": "olá"}},
    ])
    def test_recognition_event_rejects_malformed_payload(self, payload):
        """Test malformed browser payloads raise ValueError."""
        with pytest.raises(ValueError):
            RecognitionEvent.from_dict(payload)
