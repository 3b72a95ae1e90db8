"""Startup configuration: environment, .env file and the settings JSON."""
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from errors import ConfigurationError
from logging_bus import emit

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_SETTINGS: Dict[str, Any] = {
    'theme': 'darkly',
    'verbose': True,
    'activity_log_file': None,
    'script_extension': 'py',
    'source_extensions': ['.py'],
    'data_dir': str(Path.home() / '.code-synth'),
    'max_tokens': 4096,
    'temperature': 0.7,
}


class AppConfig:
    """Holds everything the engine and UI need at startup."""

    def __init__(self, api_key: Optional[str], model: str = DEFAULT_MODEL,
                 settings: Optional[Dict[str, Any]] = None,
                 settings_path: str = 'data/settings.json'):
        self.api_key = api_key
        self.model = model
        self.settings_path = settings_path
        self.settings = dict(DEFAULT_SETTINGS)
        if settings:
            self.settings.update(settings)

    def require_api_key(self) -> str:
        if not self.api_key:
            raise ConfigurationError("OPENAI_API_KEY environment variable not set")
        return self.api_key

    @property
    def data_dir(self) -> Path:
        return Path(self.settings['data_dir'])

    @property
    def session_file(self) -> Path:
        return self.data_dir / 'session.json'


def _load_settings(path: str) -> Dict[str, Any]:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, json.JSONDecodeError) as e:
        emit('WARN', 'SYSTEM', 'Ignoring unreadable settings file', path=path, error=str(e))
        return {}
    if not isinstance(data, dict):
        emit('WARN', 'SYSTEM', 'Ignoring settings file without an object', path=path)
        return {}
    return data


def load_config(settings_path: str = 'data/settings.json', env_file: Optional[str] = None) -> AppConfig:
    """Build the configuration and fail fast when no API key is available."""
    load_dotenv(env_file)
    config = AppConfig(
        api_key=os.getenv('OPENAI_API_KEY'),
        model=os.getenv('CODE_SYNTH_MODEL', DEFAULT_MODEL),
        settings=_load_settings(settings_path),
        settings_path=settings_path,
    )
    config.require_api_key()
    return config


__all__ = ['AppConfig', 'load_config', 'DEFAULT_MODEL', 'DEFAULT_SETTINGS']
