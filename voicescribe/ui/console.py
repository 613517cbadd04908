"""Terminal views of stored sessions and transcript export."""

import logging
from datetime import date
from pathlib import Path
from typing import List, Optional

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..models.session import StoredSession, StoredAnalysis

logger = logging.getLogger(__name__)


def format_time(seconds: int) -> str:
    """Format elapsed seconds as MM:SS."""
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes:02d}:{secs:02d}"


def export_filename(day: Optional[date] = None) -> str:
    day = day or date.today()
    return f"transcricao-{day.isoformat()}.txt"


def export_transcript(transcript: str, output_dir: str = ".", day: Optional[date] = None) -> Path:
    """Write a transcript to transcricao-YYYY-MM-DD.txt.

    Raises:
        ValueError: If there is nothing to export
    """
    if not transcript or not transcript.strip():
        raise ValueError("Não há conteúdo para exportar")

    directory = Path(output_dir)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(day)
    path.write_text(transcript, encoding="utf-8")
    logger.info(f"Transcript exported to {path}")
    return path


def render_sessions_table(sessions: List[StoredSession]) -> Table:
    table = Table(title="Sessões de Transcrição", show_lines=False)
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Título", style="bold")
    table.add_column("Idioma")
    table.add_column("Duração", justify="right")
    table.add_column("Palavras", justify="right")
    table.add_column("Criada em")

    for session in sessions:
        table.add_row(
            session.id,
            session.title,
            session.language,
            format_time(session.duration_seconds),
            str(session.word_count),
            session.created_at.strftime("%Y-%m-%d %H:%M"),
        )
    return table


def render_session_detail(session: StoredSession, analyses: List[StoredAnalysis]) -> Panel:
    """Panel with a session's transcript followed by its saved analyses."""
    header = Text()
    header.append(f"{session.language}  ", style="cyan")
    header.append(f"{format_time(session.duration_seconds)}  ", style="yellow")
    header.append(f"{session.word_count} palavras", style="green")

    parts = [header, Text(""), Text(session.transcript or "(sem transcrição)")]
    for analysis in analyses:
        parts.append(Text(""))
        parts.append(Text(f"❓ {analysis.question}", style="bold"))
        parts.append(Text(f"💡 {analysis.answer} ({analysis.confidence:.0%})"))
        if analysis.related_topics:
            parts.append(Text("Tópicos: " + ", ".join(analysis.related_topics), style="dim"))

    return Panel(Group(*parts), title=session.title, border_style="blue")


def print_sessions(console: Console, sessions: List[StoredSession]) -> None:
    if not sessions:
        console.print("Nenhuma sessão encontrada", style="yellow")
        return
    console.print(render_sessions_table(sessions))
