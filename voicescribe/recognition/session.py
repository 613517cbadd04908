"""Live recognition session: the transcript state machine.

The session moves between Idle and Recording. While recording it merges
recognizer events into the transcript and schedules AI enrichment for each
finalized segment without awaiting it. Enrichment replies are reconciled
against the transcript version they were computed for:

- an enhancement is applied only if the transcript version is unchanged
  since its segment was appended, and then replaces that segment (the tail);
- a language detection is dropped if the session was cleared meanwhile.
"""

import random
import asyncio
import logging
from typing import Optional, List, Set, Dict, Any, Coroutine

from .base import AbstractRecognizer, Enricher, ABORTED_ERROR
from .heuristic import (
    DEFAULT_LANGUAGE,
    detect_language_heuristic,
    language_display_name,
)
from .publisher import SessionPublisher
from ..models.analysis import LanguageDetection
from ..models.recognition import RecognitionEvent, Notification, SessionSnapshot

logger = logging.getLogger(__name__)

INITIAL_CONFIDENCE = 0.98
UNKNOWN_LANGUAGE_CODE = "unknown"


class RecognitionSession:
    """Owns the recognizer lifecycle, the transcript and its counters."""

    def __init__(self,
                 recognizer: Optional[AbstractRecognizer],
                 enricher: Enricher,
                 publisher: Optional[SessionPublisher] = None,
                 default_language: str = DEFAULT_LANGUAGE,
                 enhanced_mode: bool = True,
                 enhance_min_length: int = 20,
                 restart_delay: float = 0.5,
                 tick_interval: float = 1.0,
                 audio_level_interval: float = 0.15):
        """Initialize recognition session.

        Args:
            recognizer: Platform recognizer, or None when the platform has none
            enricher: AI client used for language detection and enhancement
            publisher: Receives state snapshots and user notifications
            default_language: Language the session starts in and resets to
            enhanced_mode: Whether finalized segments are sent for enhancement
            enhance_min_length: Segments must be longer than this to be enhanced
            restart_delay: Grace period between stop and start on language switch
            tick_interval: Period of the elapsed-time counter in seconds
            audio_level_interval: Period of the audio level sampler in seconds
        """
        self.recognizer = recognizer
        self.enricher = enricher
        self.publisher = publisher
        self.default_language = default_language
        self.enhance_min_length = enhance_min_length
        self.restart_delay = restart_delay
        self.tick_interval = tick_interval
        self.audio_level_interval = audio_level_interval

        self.is_recording = False
        self.current_language = default_language
        self.enhanced_mode = enhanced_mode

        # Transcript state
        self.transcript = ""
        self.interim_text = ""
        self.version = 0
        self.epoch = 0

        # Detection state and counters
        self.detected_language = language_display_name(default_language)
        self.confidence = INITIAL_CONFIDENCE
        self.detected_languages: List[str] = [default_language]
        self.word_count = 0
        self.recording_time_seconds = 0
        self.audio_level_percent = 0.0

        self._timers: List[asyncio.Task] = []
        self._pending: Set[asyncio.Task] = set()

    @property
    def display_text(self) -> str:
        return self.transcript + self.interim_text

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            is_recording=self.is_recording,
            transcript=self.transcript,
            interim_text=self.interim_text,
            current_language=self.current_language,
            detected_language=self.detected_language,
            confidence=self.confidence,
            enhanced_mode=self.enhanced_mode,
            detected_languages=tuple(self.detected_languages),
            word_count=self.word_count,
            recording_time_seconds=self.recording_time_seconds,
            audio_level_percent=self.audio_level_percent,
            version=self.version,
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def start(self) -> Dict[str, Any]:
        """Start continuous recognition in the current language.

        Returns:
            Result dictionary with success status
        """
        if self.is_recording:
            return {"success": False, "error": "Already recording"}

        if self.recognizer is None or not self.recognizer.is_available():
            logger.warning("Speech recognition is not available on this platform")
            self._notify("Não Suportado", "Seu navegador não suporta reconhecimento de voz", "destructive")
            return {"success": False, "error": "unsupported"}

        try:
            await self.recognizer.start(self.current_language, self)
        except Exception as e:
            logger.error(f"Error starting recognizer: {e}")
            self._notify("Erro", "Falha ao iniciar gravação", "destructive")
            return {"success": False, "error": str(e)}

        self.is_recording = True
        self.recording_time_seconds = 0
        self._start_timers()
        self._publish_state()

        logger.info(f"Started recognition in {self.current_language}")
        return {"success": True, "language": self.current_language}

    async def stop(self) -> Dict[str, Any]:
        """Stop recognition and the timers; a no-op when already stopped.

        Returns:
            Result dictionary with success status
        """
        if not self.is_recording:
            return {"success": False, "error": "Not recording"}

        try:
            await self.recognizer.stop()
        except Exception as e:
            logger.warning(f"Error stopping recognizer: {e}")

        self.is_recording = False
        self._cancel_timers()
        self.audio_level_percent = 0.0

        self._notify("Gravação Finalizada", "Transcrição salva com sucesso")
        self._publish_state()

        logger.info(f"Stopped recognition after {self.recording_time_seconds}s")
        return {"success": True, "recording_time_seconds": self.recording_time_seconds}

    def clear(self) -> None:
        """Reset transcript, counters and detections; recording continues."""
        self.transcript = ""
        self.interim_text = ""
        self.version += 1
        self.epoch += 1

        self.word_count = 0
        self.recording_time_seconds = 0
        self.detected_language = language_display_name(self.default_language)
        self.confidence = INITIAL_CONFIDENCE
        self.detected_languages = [self.default_language]

        logger.info(f"Transcript cleared (version {self.version})")
        self._publish_state()

    async def switch_language(self, language_code: str) -> Dict[str, Any]:
        """Switch the recognition language, restarting the recognizer if recording.

        Args:
            language_code: Language tag such as 'en-US'

        Returns:
            Result dictionary with the new language and restart outcome
        """
        self.current_language = language_code
        self.detected_language = language_display_name(language_code)
        logger.info(f"Switching language to {language_code}")

        if not self.is_recording:
            self._publish_state()
            return {"success": True, "language": language_code, "restarted": False}

        await self.stop()
        # The recognizer needs a moment before it can bind to a new language
        await asyncio.sleep(self.restart_delay)
        result = await self.start()
        return {"success": result["success"], "language": language_code, "restarted": result["success"]}

    def toggle_enhanced_mode(self) -> bool:
        """Flip AI enhancement of finalized segments.

        Returns:
            The new value of enhanced_mode
        """
        self.enhanced_mode = not self.enhanced_mode
        if self.enhanced_mode:
            self._notify("Modo Avançado Ativado", "Usando IA para melhorar a transcrição")
        else:
            self._notify("Modo Avançado Desativado", "Usando apenas transcrição básica")
        self._publish_state()
        return self.enhanced_mode

    async def wait_for_enrichment(self) -> None:
        """Wait until every scheduled enrichment task has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def close(self) -> None:
        """Stop recording and cancel in-flight enrichment."""
        if self.is_recording:
            await self.stop()
        self._cancel_timers()

        pending = list(self._pending)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        logger.debug(f"Session closed, cancelled {len(pending)} enrichment tasks")

    # ------------------------------------------------------------------
    # Recognizer callbacks
    # ------------------------------------------------------------------

    def on_start(self) -> None:
        self._notify("Gravação Iniciada", "Começando a transcrição em tempo real")

    def on_result(self, event: RecognitionEvent) -> None:
        """Merge a recognizer event into the transcript.

        Final text is committed; the interim tail is replaced, not appended.
        """
        final_text = ""
        interim_text = ""
        for result in event.results[event.result_index:]:
            if result.is_final:
                final_text += result.transcript
            else:
                interim_text += result.transcript

        segment_start = len(self.transcript)
        if final_text:
            self.transcript += final_text
            self.version += 1
        self.interim_text = interim_text
        self._update_word_count()
        self._publish_state()

        if final_text:
            self._enrich_segment(final_text, segment_start)

    def on_error(self, error: str) -> None:
        logger.error(f"Speech recognition error: {error}")
        self.is_recording = False
        self._cancel_timers()
        self.audio_level_percent = 0.0

        if error != ABORTED_ERROR:
            self._notify("Erro na Gravação", "Falha no reconhecimento de voz", "destructive")
        self._publish_state()

    def on_end(self) -> None:
        if not self.is_recording:
            return
        logger.info("Recognizer ended")
        self.is_recording = False
        self._cancel_timers()
        self.audio_level_percent = 0.0
        self._publish_state()

    # ------------------------------------------------------------------
    # Enrichment
    # ------------------------------------------------------------------

    def _enrich_segment(self, segment: str, segment_start: int) -> None:
        self._spawn(self._detect_language(segment, self.epoch))

        if self.enhanced_mode and len(segment) > self.enhance_min_length:
            self._spawn(self._enhance_segment(segment, segment_start, self.version, self.current_language))

    async def _detect_language(self, segment: str, epoch: int) -> None:
        try:
            detection: Optional[LanguageDetection] = await self.enricher.detect_language(segment)
        except Exception as e:
            logger.warning(f"AI language detection failed, using heuristic: {e}")
            detection = None

        if epoch != self.epoch:
            logger.debug("Discarding language detection sent before clear")
            return

        if detection is None or detection.language_code == UNKNOWN_LANGUAGE_CODE:
            detection = detect_language_heuristic(segment)
            if detection is None:
                return

        self.detected_language = detection.language
        self.confidence = detection.confidence
        if detection.language_code not in self.detected_languages:
            self.detected_languages.append(detection.language_code)
        self._publish_state()

    async def _enhance_segment(self, segment: str, segment_start: int, version: int, target_language: str) -> None:
        try:
            enhancement = await self.enricher.enhance_text(segment, target_language)
        except Exception as e:
            logger.warning(f"Enhancement failed, keeping segment as recognized: {e}")
            return

        if version != self.version:
            logger.info(f"Discarding stale enhancement (sent at version {version}, now {self.version})")
            return

        enhanced = enhancement.enhanced_text
        if not enhanced or enhanced == segment:
            return

        self.transcript = self.transcript[:segment_start] + enhanced
        self.version += 1
        self._update_word_count()
        self._publish_state()
        logger.debug(f"Applied enhancement, transcript now at version {self.version}")

    def _spawn(self, coro: Coroutine) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._on_enrichment_done)

    def _on_enrichment_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Enrichment task failed", exc_info=task.exception())

    # ------------------------------------------------------------------
    # Timers
    # ------------------------------------------------------------------

    def _start_timers(self) -> None:
        self._cancel_timers()
        loop = asyncio.get_running_loop()
        self._timers = [
            loop.create_task(self._count_elapsed()),
            loop.create_task(self._sample_audio_level()),
        ]

    def _cancel_timers(self) -> None:
        for timer in self._timers:
            timer.cancel()
        self._timers = []

    async def _count_elapsed(self) -> None:
        while True:
            await asyncio.sleep(self.tick_interval)
            self.recording_time_seconds += 1
            self._publish_state()

    async def _sample_audio_level(self) -> None:
        # Placeholder signal, not measured from the microphone
        while True:
            await asyncio.sleep(self.audio_level_interval)
            self.audio_level_percent = random.random() * 100
            self._publish_state()

    # ------------------------------------------------------------------

    def _update_word_count(self) -> None:
        self.word_count = len(self.display_text.split())

    def _notify(self, title: str, description: str, variant: str = "default") -> None:
        logger.info(f"{title}: {description}")
        if self.publisher:
            self.publisher.publish_notification(Notification(title, description, variant))

    def _publish_state(self) -> None:
        if self.publisher:
            self.publisher.publish_state(self.snapshot())
