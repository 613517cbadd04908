"""Main application entry point for VoiceScribe."""

import sys
import argparse
import logging
from pathlib import Path
from typing import Optional

from aiohttp import web
from rich.console import Console

from .ai import create_ai_service
from .api import create_app
from .config import VoiceScribeConfig
from .storage import create_session_store
from .ui import export_transcript, print_sessions, render_session_detail

logger = logging.getLogger(__name__)


class Server:

    def __init__(self, config_path: Optional[str], log_level: Optional[str] = None):
        # Load configuration
        self.config = VoiceScribeConfig(config_path)
        # Set up logging (override config with command line if specified)
        level = log_level or self.config.get('logging.level', 'INFO')
        setup_logging(self.config, level)
        self.store = create_session_store(self.config)

    def init(self) -> web.Application:
        # Initialize services
        logger.info("Initializing services...")
        ai_service = create_ai_service(self.config)
        self.app = create_app(self.config, ai_service, self.store)
        return self.app

    def run(self) -> None:
        host = self.config.get('server.host', '127.0.0.1')
        port = self.config.get('server.port', 5000)
        logger.info(f"Serving on http://{host}:{port}")
        web.run_app(self.app, host=host, port=port, print=None)


def setup_logging(config: VoiceScribeConfig, level: str = "INFO") -> None:
    """Set up logging configuration from YAML config."""
    # Get log file path from config
    log_file_path = config.get('logging.file_path', 'data/logs/voicescribe.log')
    console_output = config.get('logging.console_output', True)

    # Create logs directory if it doesn't exist
    log_dir = Path(log_file_path).parent
    log_dir.mkdir(parents=True, exist_ok=True)

    # Set up handlers
    handlers = []

    # File handler - always write to file
    file_handler = logging.FileHandler(log_file_path, encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
    )
    file_handler.setFormatter(file_formatter)
    handlers.append(file_handler)

    # Console handler - only if enabled in config
    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.WARNING)  # Only show warnings and above on console
        console_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        console_handler.setFormatter(console_formatter)
        handlers.append(console_handler)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper()))
    for handler in handlers:
        root_logger.addHandler(handler)

    # Log startup
    logger = logging.getLogger(__name__)
    logger.info("="*50)
    logger.info("VoiceScribe starting up")
    logger.info(f"Log file: {log_file_path}")
    logger.info(f"Log level set to: {level}")
    logger.info("="*50)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="VoiceScribe - Live transcription with AI analysis",
        epilog="Commands: serve, sessions, show ID, export ID"
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to configuration YAML file (default: built-in settings)"
    )

    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level (default: from config, INFO)"
    )

    parser.add_argument(
        "--version",
        action="version",
        version="VoiceScribe v0.1.0"
    )

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("serve", help="Run the HTTP and live websocket server")
    subparsers.add_parser("sessions", help="List stored sessions")

    show = subparsers.add_parser("show", help="Show a stored session and its analyses")
    show.add_argument("session_id")

    export = subparsers.add_parser("export", help="Export a session transcript to a text file")
    export.add_argument("session_id")
    export.add_argument("--output-dir", default=".", help="Directory for the exported file")

    return parser


def run_command(server: Server, args: argparse.Namespace, console: Console) -> int:
    """Execute a CLI command and return the exit code."""
    command = args.command or "serve"

    if command == "serve":
        server.init()
        server.run()
        return 0

    if command == "sessions":
        print_sessions(console, server.store.list_sessions())
        return 0

    session = server.store.get_session(args.session_id)
    if session is None:
        console.print(f"❌ Sessão não encontrada: {args.session_id}", style="red")
        return 1

    if command == "show":
        console.print(render_session_detail(session, server.store.list_analyses(session.id)))
        return 0

    path = export_transcript(session.transcript, args.output_dir)
    console.print(f"✅ Transcrição exportada: {path}", style="green")
    return 0


def main() -> None:
    """Main entry point for VoiceScribe."""
    args = build_parser().parse_args()
    console = Console()

    try:
        server = Server(args.config, args.log_level)
        sys.exit(run_command(server, args, console))
    except KeyboardInterrupt:
        print("\n👋 Goodbye!")
    except (ValueError, FileNotFoundError) as e:
        console.print(f"❌ Error: {e}", style="red")
        logging.error(f"Application error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
