"""VoiceScribe: live speech transcription with AI-assisted enrichment."""

__version__ = "0.1.0"
