"""Unit tests for the command line entry point."""

from pathlib import Path
from types import SimpleNamespace

import pytest
from rich.console import Console

from voicescribe.main import build_parser, run_command
from voicescribe.storage import MemorySessionStore


@pytest.fixture
def server():
    return SimpleNamespace(store=MemorySessionStore())


@pytest.mark.unit
class TestCommandLine:
    """Test cases for argument parsing and non-server commands."""

    def test_default_command_is_serve(self):
        """Test default command is serve."""
        args = build_parser().parse_args([])
        assert args.command is None
        assert args.config is None

    def test_export_arguments(self):
        """Test export arguments."""
        args = build_parser().parse_args(["--log-level", "DEBUG", "export", "abc", "--output-dir", "out"])

        assert args.command == "export"
        assert args.session_id == "abc"
        assert args.output_dir == "out"
        assert args.log_level == "DEBUG"

    def test_sessions_command(self, server):
        """Test sessions command."""
        server.store.create_session({"title": "Palestra"})
        console = Console(record=True, width=120)

        code = run_command(server, build_parser().parse_args(["sessions"]), console)

        assert code == 0
        assert "Palestra" in console.export_text()

    def test_show_missing_session(self, server):
        """Test show missing session."""
        console = Console(record=True)

        code = run_command(server, build_parser().parse_args(["show", "nope"]), console)

        assert code == 1
        assert "Sessão não encontrada" in console.export_text()

    def test_export_command(self, server, temp_data_dir):
        """Test export command."""
        session = server.store.create_session({"title": "Ditado", "transcript": "texto ditado"})
        args = build_parser().parse_args(["export", session.id, "--output-dir", temp_data_dir])

        code = run_command(server, args, Console(record=True))

        assert code == 0
        exported = list(Path(temp_data_dir).glob("transcricao-*.txt"))
        assert len(exported) == 1
        assert exported[0].read_text(encoding="utf-8") == "texto ditado"
