"""Terminal presentation for VoiceScribe."""

from .console import (
    format_time,
    export_transcript,
    render_sessions_table,
    render_session_detail,
    print_sessions,
)

__all__ = [
    "format_time",
    "export_transcript",
    "render_sessions_table",
    "render_session_detail",
    "print_sessions",
]
