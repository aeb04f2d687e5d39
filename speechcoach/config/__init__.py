"""YAML configuration for SpeechCoach."""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "speechcoach.yaml"

DEFAULTS: Dict[str, Any] = {
    "capture": {
        "language": "en-GB",
        "sample_rate": 16000,
        "single_utterance": False,
        "skip_recorder": False,
        "timeslice_seconds": 1.0,
        "stop_grace_period_seconds": 0.5,
        "restart": {"max_attempts": 50},
    },
    "google_cloud": {"enable_automatic_punctuation": True},
    "gemini": {"model": "gemini-2.5-flash"},
    "playback": {"slow": False},
    "logging": {
        "level": "INFO",
        "file_path": "data/logs/speechcoach.log",
        "console_output": True,
    },
}

# Keys holding filesystem paths, resolved against the config file's directory
PATH_KEYS: Tuple[str, ...] = ("google_cloud.credentials_path", "logging.file_path")


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively overlay override onto a copy of base."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class SpeechCoachConfig:
    """Settings read from speechcoach.yaml layered over built-in defaults."""

    def __init__(self, config_path: Optional[str] = None):
        """Load configuration.

        Args:
            config_path: YAML file to read. When None, speechcoach.yaml in the
                        working directory is used if it exists, otherwise only
                        the defaults apply.

        Raises:
            FileNotFoundError: If config_path does not exist
            ValueError: If the file is not a non-empty YAML mapping
        """
        if config_path is None and Path(DEFAULT_CONFIG_NAME).exists():
            config_path = DEFAULT_CONFIG_NAME

        self.config_file = Path(config_path) if config_path is not None else None
        if self.config_file is None:
            logger.info("No configuration file found, using built-in defaults")
            self.config = copy.deepcopy(DEFAULTS)
            return

        if not self.config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_file}")

        logger.info(f"Loading configuration from: {self.config_file}")
        self.config = _merge(DEFAULTS, self._read_file())
        logger.info("Configuration loaded successfully")

    def _read_file(self) -> Dict[str, Any]:
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file: {e}") from e
        except OSError as e:
            raise ValueError(f"Failed to read configuration file: {e}") from e

        if not loaded:
            raise ValueError(f"Configuration file is empty: {self.config_file}")
        if not isinstance(loaded, dict):
            raise ValueError(f"Configuration file must contain a mapping, got {type(loaded).__name__}")

        base_dir = self.config_file.parent
        for key_path in PATH_KEYS:
            section, _, key = key_path.partition('.')
            value = loaded.get(section, {}).get(key) if isinstance(loaded.get(section), dict) else None
            if value and not os.path.isabs(value):
                loaded[section][key] = str(base_dir / value)
        return loaded

    def get(self, key_path: str, default: Any = None) -> Any:
        """Look up a dot-separated key such as 'capture.restart.max_attempts'.

        Returns:
            The configured value, or default when any part of the path is missing
        """
        node: Any = self.config
        for key in key_path.split('.'):
            if not isinstance(node, dict) or key not in node:
                return default
            node = node[key]
        return node

    def set(self, key_path: str, value: Any) -> None:
        """Set a dot-separated key, creating intermediate sections."""
        *parents, leaf = key_path.split('.')
        node = self.config
        for key in parents:
            node = node.setdefault(key, {})
        node[leaf] = value
        logger.debug(f"Configuration key '{key_path}' set to: {value}")

    def get_google_credentials_path(self) -> Optional[str]:
        """Service account file from config, else GOOGLE_APPLICATION_CREDENTIALS."""
        return self.get('google_cloud.credentials_path') or os.environ.get('GOOGLE_APPLICATION_CREDENTIALS')

    def get_gemini_api_key(self) -> str:
        """Gemini API key from config, else GEMINI_API_KEY.

        Raises:
            ValueError: If neither is set
        """
        api_key = self.get('gemini.api_key') or os.environ.get('GEMINI_API_KEY')
        if not api_key:
            raise ValueError("GEMINI_API_KEY not available. Set gemini.api_key in "
                             f"{DEFAULT_CONFIG_NAME} or the GEMINI_API_KEY environment variable.")
        return api_key
