"""Key-value persistence for the session: documents, transcript, selection."""
import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, List, Optional, Protocol

from pydantic import TypeAdapter, ValidationError

from errors import StorageParseError
from logging_bus import emit
from models import Document, Message

FILES_KEY = 'code_synthesizer_files'
HISTORY_KEY = 'code_synthesizer_chat_history'
SELECTED_KEY = 'code_synthesizer_selected_file_name'

_documents = TypeAdapter(List[Document])
_messages = TypeAdapter(List[Message])


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStore:
    def __init__(self, data: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(data or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStore:
    """String values kept in a single JSON object on disk.

    Safe to share between the Tk thread and a turn's worker thread.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self.data = self._read()
        self._lock = threading.Lock()

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open('r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            emit('WARN', 'STORAGE', 'Session file unreadable, starting empty', path=str(self.path), error=str(e))
            return {}
        if not isinstance(data, dict):
            emit('WARN', 'STORAGE', 'Session file is not an object, starting empty', path=str(self.path))
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            'w', encoding='utf-8', dir=self.path.parent, prefix=self.path.name, suffix='.tmp', delete=False
        ) as f:
            json.dump(self.data, f, indent=2)
        try:
            os.replace(f.name, self.path)
        except OSError:
            os.unlink(f.name)
            raise

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self.data[key] = value
            self._write()

    def remove(self, key: str) -> None:
        with self._lock:
            if self.data.pop(key, None) is not None:
                self._write()


class SessionStore:
    """Typed access to the persisted session on top of a ``KeyValueStore``."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def _decode(self, key: str, adapter: TypeAdapter) -> list:
        raw = self.store.get(key)
        if raw is None:
            return []
        try:
            return adapter.validate_json(raw)
        except ValidationError as e:
            raise StorageParseError(key, str(e)) from e

    def _load(self, key: str, adapter: TypeAdapter) -> list:
        try:
            return self._decode(key, adapter)
        except StorageParseError as e:
            emit('WARN', 'STORAGE', 'Falling back to empty state', key=key, error=e.message)
            return []

    def load_documents(self) -> List[Document]:
        return self._load(FILES_KEY, _documents)

    def save_documents(self, documents: List[Document]) -> None:
        self.store.set(FILES_KEY, _documents.dump_json(documents).decode('utf-8'))

    def load_transcript(self) -> List[Message]:
        return self._load(HISTORY_KEY, _messages)

    def save_transcript(self, transcript: List[Message]) -> None:
        self.store.set(HISTORY_KEY, _messages.dump_json(list(transcript)).decode('utf-8'))

    def load_selected(self) -> Optional[str]:
        return self.store.get(SELECTED_KEY)

    def save_selected(self, name: Optional[str]) -> None:
        if name:
            self.store.set(SELECTED_KEY, name)
        else:
            self.store.remove(SELECTED_KEY)

    def clear(self) -> None:
        for key in (FILES_KEY, HISTORY_KEY, SELECTED_KEY):
            self.store.remove(key)
        emit('INFO', 'STORAGE', 'Session cleared')


__all__ = [
    'KeyValueStore',
    'MemoryStore',
    'JsonFileStore',
    'SessionStore',
    'FILES_KEY',
    'HISTORY_KEY',
    'SELECTED_KEY',
]
