"""Simple YAML configuration loader for VoiceScribe."""

import os
import copy
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)


DEFAULT_CONFIG: Dict[str, Any] = {
    "server": {
        "host": "127.0.0.1",
        "port": 5000,
    },
    "ai": {
        "provider": "openai",
        "request_timeout_seconds": 60,
        "openai": {
            "model": "gpt-4",
        },
        "gemini": {
            "model": "gemini-2.0-flash-exp",
        },
    },
    "storage": {
        "backend": "memory",
        "data_directory": "data",
    },
    "session": {
        "default_language": "pt-BR",
        "enhanced_mode": True,
        "enhance_min_length": 20,
        "restart_delay_seconds": 0.5,
        "tick_interval_seconds": 1.0,
        "audio_level_interval_seconds": 0.15,
    },
    "logging": {
        "level": "INFO",
        "file_path": "data/logs/voicescribe.log",
        "console_output": True,
    },
}

API_KEY_ENVIRONMENT = {
    "openai": "OPENAI_API_KEY",
    "gemini": "GEMINI_API_KEY",
}


def _merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge overrides into a copy of base."""
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class VoiceScribeConfig:
    """VoiceScribe configuration loader."""

    def __init__(self, config_path: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None):
        """Initialize configuration loader.

        Args:
            config_path: Path to YAML config file. If None, the built-in defaults
                        are used and relative paths stay relative to the working directory.
            overrides: Values merged on top of the loaded configuration
        """
        self.config_file = Path(config_path) if config_path else None

        if self.config_file is not None:
            if not self.config_file.exists():
                raise FileNotFoundError(f"Configuration file not found: {self.config_file}")
            logger.info(f"Loading configuration from: {self.config_file}")
            self.config = _merge(DEFAULT_CONFIG, self._load_config())
        else:
            logger.info("No configuration file given, using defaults")
            self.config = copy.deepcopy(DEFAULT_CONFIG)

        if overrides:
            self.config = _merge(self.config, overrides)

    def _load_config(self) -> Dict[str, Any]:
        """Load and parse YAML configuration file."""
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file: {e}")
        except OSError as e:
            raise ValueError(f"Failed to load configuration: {e}")

        if not config:
            raise ValueError("Configuration file is empty")
        if not isinstance(config, dict):
            raise ValueError("Configuration file must contain a mapping")

        # Resolve relative paths
        self._resolve_paths(config)

        logger.info("Configuration loaded successfully")
        return config

    def _resolve_paths(self, config: Dict[str, Any]) -> None:
        """Resolve relative paths in configuration relative to config file location."""
        config_dir = self.config_file.parent

        # Resolve data directory
        if 'storage' in config and 'data_directory' in config['storage']:
            data_dir = config['storage']['data_directory']
            if not os.path.isabs(data_dir):
                config['storage']['data_directory'] = str(config_dir / data_dir)

        # Resolve log file path
        if 'logging' in config and 'file_path' in config['logging']:
            log_path = config['logging']['file_path']
            if not os.path.isabs(log_path):
                config['logging']['file_path'] = str(config_dir / log_path)

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation (e.g., 'session.default_language').

        Args:
            key_path: Dot-separated key path (e.g., 'ai.openai.model')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split('.')
        value = self.config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def set(self, key_path: str, value: Any) -> None:
        """Set configuration value using dot notation.

        Args:
            key_path: Dot-separated path to config value (e.g., 'ai.provider')
            value: Value to set
        """
        keys = key_path.split('.')
        config_dict = self.config

        # Navigate to the parent dictionary
        for key in keys[:-1]:
            if key not in config_dict:
                config_dict[key] = {}
            config_dict = config_dict[key]

        # Set the final value
        config_dict[keys[-1]] = value
        logger.debug(f"Configuration key '{key_path}' set to: {value}")

    def get_ai_api_key(self, provider: Optional[str] = None) -> str:
        """Get the API key for an AI provider - CRASHES if not found.

        The key is read from ``ai.<provider>.api_key`` and falls back to the
        provider's environment variable (OPENAI_API_KEY, GEMINI_API_KEY).
        """
        provider = provider or self.get('ai.provider', 'openai')
        if provider not in API_KEY_ENVIRONMENT:
            raise ValueError(f"Unknown AI provider: {provider}")

        api_key = self.get(f'ai.{provider}.api_key') or os.environ.get(API_KEY_ENVIRONMENT[provider])
        if not api_key:
            raise ValueError(
                f"API key for '{provider}' not configured: set ai.{provider}.api_key "
                f"or {API_KEY_ENVIRONMENT[provider]}"
            )
        return api_key

    def get_data_directory(self) -> str:
        """Get data directory path."""
        data_dir = self.get('storage.data_directory', 'data')
        return str(Path(data_dir).absolute())
