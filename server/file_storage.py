"""File-based storage implementation."""

import json
import logging
import os
import re

from core.errors import PersistenceError
from core.interfaces import Storage

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = '~/.config/vocabtrack/config.json'


def load_config_file(path: str) -> dict:
    """Read the JSON config file holding optional settings such as gemini_api_key."""
    if not os.path.exists(path):
        raise FileNotFoundError(
            f"Config file not found at {path}\n"
            f'Please create it with: {{"gemini_api_key": "YOUR_API_KEY_HERE"}}'
        )
    with open(path, 'r') as f:
        return json.load(f)


def check_shape(key: str, value, expected: type):
    """Reject stored values of the wrong JSON type."""
    if not isinstance(value, expected):
        kind = 'collection' if expected is list else 'mapping'
        raise PersistenceError(f"Stored value for {key} is not a {kind}")
    return value


class FileStorage(Storage):
    """Stores each key as a JSON file in a state directory."""

    def __init__(self, config_file: str = None, state_dir: str = None):
        self.config_file = config_file or os.path.expanduser(DEFAULT_CONFIG_FILE)
        # Project root is one level up from server/
        project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
        self.state_dir = state_dir or os.environ.get('VOCAB_STATE_DIR') or project_root

    def _get_file(self, key: str) -> str:
        """Get the JSON file path for a storage key."""
        safe_key = re.sub(r'[^A-Za-z0-9_.-]', '_', key)
        return os.path.join(self.state_dir, f'{safe_key}.json')

    def load_config(self) -> dict:
        return load_config_file(self.config_file)

    def _load(self, key: str, default):
        path = self._get_file(key)
        if not os.path.exists(path):
            return default
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Could not read {path}: {e}") from e

    def _save(self, key: str, value) -> None:
        path = self._get_file(key)
        tmp_path = path + '.tmp'
        try:
            os.makedirs(self.state_dir, exist_ok=True)
            payload = json.dumps(value, indent=2, ensure_ascii=False)
            with open(tmp_path, 'w', encoding='utf-8') as f:
                f.write(payload)
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to save {key}: {e}")
            raise PersistenceError(f"Could not write {path}: {e}") from e

    def load_collection(self, key: str) -> list[dict]:
        return check_shape(key, self._load(key, []), list)

    def save_collection(self, key: str, items: list[dict]) -> None:
        self._save(key, items)

    def load_map(self, key: str) -> dict:
        return check_shape(key, self._load(key, {}), dict)

    def save_map(self, key: str, mapping: dict) -> None:
        self._save(key, mapping)

    def delete(self, key: str) -> bool:
        """Remove the file backing a key."""
        path = self._get_file(key)
        if os.path.exists(path):
            os.remove(path)
            return True
        return False
