"""
Configuration management for TDS.
"""
import copy
import os
import json
import logging
import yaml
from pathlib import Path
from typing import Any, Dict, Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

# Default configuration
DEFAULT_CONFIG = {
    "feed": {
        "url": "https://stallman.org/rss/rss.xml",
        "origin": "stallman.org"
    },
    "http": {
        "timeout": 20,
        "concurrency": 8,
        "retries": 3,
        "agent": "Mozilla/5.0 (X11; Linux x86_64; rv:109.0) Gecko/20100101 Firefox/115.0"
    },
    "images": {
        # Anything smaller than this many bytes is treated as a lazy-load placeholder
        "placeholder": 2000
    },
    "output": {
        "filename": "tds.html",
        "css": None
    },
    "diagnostics": {
        "verbose": False
    }
}

class Config:
    """
    Settings for a TDS run.

    Values come from ``DEFAULT_CONFIG``, deep-merged with an optional YAML or
    JSON file, then overridden by ``TDS_*`` environment variables.
    """
    def __init__(self, config_path: Optional[str] = None):
        """
        Args:
            config_path: Path to a YAML or JSON file; defaults only if omitted
        """
        self.config_path = config_path
        self.config = self._load_config()

    def _load_config(self) -> Dict:
        config = copy.deepcopy(DEFAULT_CONFIG)

        if self.config_path:
            try:
                self._update_dict(config, self._read_file(Path(self.config_path)))
            except (OSError, ValueError, yaml.YAMLError) as e:
                logger.error(f"Error loading config from {self.config_path}: {e}")
                logger.error("Using default configuration")

        self._override_from_env(config)
        return config

    @staticmethod
    def _read_file(path: Path) -> Dict:
        """
        Read a settings file.

        Returns:
            The settings, or an empty dict if the file does not exist

        Raises:
            ValueError: If the file is neither YAML nor JSON, or is malformed
        """
        if not path.exists():
            logger.warning(f"Config file {path} not found")
            return {}

        suffix = path.suffix.lower()
        with open(path, 'r', encoding='utf-8') as f:
            if suffix in ('.yaml', '.yml'):
                return yaml.safe_load(f) or {}
            if suffix == '.json':
                return json.load(f)
        raise ValueError(f"Unsupported config file format: {suffix}")

    def _update_dict(self, target: Dict, source: Dict) -> None:
        """Merge ``source`` into ``target``, descending into nested sections."""
        for key, value in source.items():
            if isinstance(value, dict) and isinstance(target.get(key), dict):
                self._update_dict(target[key], value)
            else:
                target[key] = value

    def _override_from_env(self, config: Dict, prefix: str = 'TDS_') -> None:
        """
        Override configuration with environment variables.

        ``TDS_HTTP_TIMEOUT=30`` sets ``http.timeout``. The config path
        variable itself is not a setting and is skipped.

        Args:
            config: Configuration dictionary to update
            prefix: Prefix for environment variables
        """
        for key, value in os.environ.items():
            if not key.startswith(prefix) or key == f'{prefix}CONFIG_PATH':
                continue

            parts = key[len(prefix):].lower().split('_')

            current = config
            for part in parts[:-1]:
                if not isinstance(current.get(part), dict):
                    current[part] = {}
                current = current[part]

            try:
                current[parts[-1]] = json.loads(value)
            except json.JSONDecodeError:
                current[parts[-1]] = value

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value.

        Args:
            key: Dot-separated key path (e.g., 'http.timeout')
            default: Default value if key not found

        Returns:
            Configuration value
        """
        current = self.config

        for part in key.split('.'):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]

        return current


# Global configuration instance
config = Config(os.getenv('TDS_CONFIG_PATH'))

def get_config(key: str, default: Any = None) -> Any:
    """
    Get a configuration value.

    Args:
        key: Dot-separated key path (e.g., 'http.timeout')
        default: Default value if key not found

    Returns:
        Configuration value
    """
    return config.get(key, default)


def load_config(config_path: Optional[str]) -> Config:
    """
    Replace the global configuration with one loaded from ``config_path``.

    Args:
        config_path: Path to a YAML or JSON configuration file

    Returns:
        The new global Config
    """
    global config
    config = Config(config_path)
    return config
