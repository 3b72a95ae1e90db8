"""Drive model calls and keep the transcript consistent with the live stream.

One turn runs at a time. A turn starts in ``SENDING`` (analysis) or
``STREAMING`` (follow-up) and always ends back in ``IDLE`` with one of three
outcomes: success, cancelled or errored. Deltas are applied to the in-flight
message in arrival order; cancellation is checked once per delta.
"""
import threading
from contextlib import closing
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List, Optional, Tuple

from config import AppConfig
from errors import InputValidationError, StreamError
from logging_bus import emit
from models import Document, Message, Preferences, Role
from persistence import SessionStore
from services.model_client import Conversation, ModelClient, OpenAIModelClient
from .file_generator import latest_script
from .prompt_builder import build_analysis_prompt


class EngineState(str, Enum):
    IDLE = "idle"
    SENDING = "sending"
    STREAMING = "streaming"


class TurnOutcome(str, Enum):
    SUCCESS = "success"
    CANCELLED = "cancelled"
    ERRORED = "errored"


@dataclass(frozen=True)
class TurnResult:
    outcome: TurnOutcome
    error: Optional[StreamError] = None

    @property
    def error_message(self) -> Optional[str]:
        if self.error is None:
            return None
        return f"Error: {self.error.message}"


class CancellationToken:
    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


TranscriptListener = Callable[[Tuple[Message, ...]], None]


class TranscriptEngine:
    def __init__(self, config: AppConfig, client: Optional[ModelClient] = None,
                 store: Optional[SessionStore] = None):
        api_key = config.require_api_key()
        self.config = config
        self.model = config.model
        self.client = client or OpenAIModelClient(
            api_key,
            temperature=config.settings.get('temperature', 0.7),
            max_tokens=config.settings.get('max_tokens', 4096),
        )
        self.store = store
        self.last_error: Optional[str] = None
        self._transcript: List[Message] = store.load_transcript() if store else []
        self._conversation: Optional[Conversation] = None
        self._state = EngineState.IDLE
        self._token: Optional[CancellationToken] = None
        self._lock = threading.RLock()
        self._listeners: List[TranscriptListener] = []
        self._error_listeners: List[Callable[[str], None]] = []

    # --- observation ---
    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._state is not EngineState.IDLE

    @property
    def transcript(self) -> Tuple[Message, ...]:
        with self._lock:
            return tuple(self._transcript)

    def subscribe(self, callback: TranscriptListener) -> None:
        """Call ``callback`` with a transcript snapshot after every change."""
        self._listeners.append(callback)

    def subscribe_errors(self, callback: Callable[[str], None]) -> None:
        self._error_listeners.append(callback)

    def latest_script(self) -> str:
        return latest_script(self.transcript)

    # --- operations ---
    def start_analysis(self, documents: Iterable[Document], preferences: Preferences) -> TurnResult:
        documents = list(documents)
        if not documents:
            raise InputValidationError("Please upload at least one Python file to review.")
        if not preferences.objective.strip():
            raise InputValidationError("Please describe the primary objective of the script.")
        prompt = build_analysis_prompt(documents, preferences)
        token = self._begin(EngineState.SENDING)
        try:
            with self._lock:
                self._transcript = []
                self._conversation = None
            self._changed()
            emit('INFO', 'STREAM', 'Starting analysis', files=len(documents), model=self.model)
            conversation = self.client.create_conversation(self.model)
            with self._lock:
                self._conversation = conversation
            cancelled = self._consume(conversation, prompt, token)
        except Exception as e:
            return self._fail(e, token, restore=None)
        return self._finish(cancelled)

    def send_follow_up(self, message: str) -> TurnResult:
        text = message.strip()
        if not text:
            raise InputValidationError("Please enter a follow-up question.")
        with self._lock:
            if not any(m.content for m in self._transcript):
                raise InputValidationError("Run an analysis before asking follow-up questions.")
        token = self._begin(EngineState.STREAMING)
        with self._lock:
            before = list(self._transcript)
            history = [{'role': m.role.value, 'text': m.content} for m in before if m.content]
            conversation = self._conversation
        try:
            with self._lock:
                self._transcript.append(Message(role=Role.USER, content=text))
                self._transcript.append(Message(role=Role.MODEL, content=''))
            self._changed()
            emit('INFO', 'STREAM', 'Sending follow-up', chars=len(text), rebuilt=conversation is None)
            if conversation is None:
                conversation = self.client.create_conversation(self.model, history=history)
                with self._lock:
                    self._conversation = conversation
            cancelled = self._consume(conversation, text, token)
        except Exception as e:
            return self._fail(e, token, restore=before)
        return self._finish(cancelled)

    def cancel(self) -> bool:
        with self._lock:
            if self._token is None:
                return False
            self._token.cancel()
        emit('WARN', 'STREAM', 'Cancellation requested', state=self._state.value)
        return True

    def clear(self) -> None:
        """Forget the transcript and conversation; the caller clears storage."""
        with self._lock:
            if self.busy:
                raise InputValidationError("Cannot clear while a response is streaming.")
            self._transcript = []
            self._conversation = None
            self.last_error = None
        self._changed(persist=False)

    # --- internals ---
    def _begin(self, state: EngineState) -> CancellationToken:
        with self._lock:
            if self._state is not EngineState.IDLE:
                raise InputValidationError("A response is still in progress; wait for it or cancel it.")
            self._state = state
            self._token = CancellationToken()
            self.last_error = None
            return self._token

    def _consume(self, conversation: Conversation, message: str, token: CancellationToken) -> bool:
        """Apply deltas until the stream ends; returns True when cancelled."""
        chunks = 0
        with closing(conversation.send_streaming(message)) as deltas:
            for delta in deltas:
                if token.cancelled:
                    emit('WARN', 'STREAM', 'Stream cancelled', chunks=chunks)
                    return True
                self._apply(delta)
                chunks += 1
        emit('INFO', 'STREAM', 'Stream complete', chunks=chunks)
        return token.cancelled

    def _apply(self, delta: str) -> None:
        with self._lock:
            if self._state is EngineState.SENDING:
                self._transcript.append(Message(role=Role.MODEL, content=''))
                self._state = EngineState.STREAMING
            last = self._transcript[-1]
            self._transcript[-1] = Message(role=Role.MODEL, content=last.content + delta)
        self._changed()

    def _drop_empty_placeholder(self) -> None:
        if self._transcript and self._transcript[-1].role == Role.MODEL and not self._transcript[-1].content:
            self._transcript.pop()

    def _finish(self, cancelled: bool) -> TurnResult:
        with self._lock:
            self._drop_empty_placeholder()
            if cancelled:
                # the next follow-up rebuilds context from the transcript
                self._conversation = None
            self._state = EngineState.IDLE
            self._token = None
        self._changed()
        if cancelled:
            return TurnResult(TurnOutcome.CANCELLED)
        return TurnResult(TurnOutcome.SUCCESS)

    def _fail(self, exc: Exception, token: CancellationToken, restore: Optional[List[Message]]) -> TurnResult:
        if token.cancelled:
            emit('WARN', 'STREAM', 'Stream ended after cancellation', error=str(exc))
            return self._finish(True)
        error = exc if isinstance(exc, StreamError) else StreamError(str(exc) or type(exc).__name__)
        with self._lock:
            if restore is not None:
                self._transcript = restore
            else:
                self._drop_empty_placeholder()
            self._conversation = None
            self._state = EngineState.IDLE
            self._token = None
        self._changed()
        result = TurnResult(TurnOutcome.ERRORED, error)
        self.last_error = result.error_message
        emit('ERROR', 'STREAM', 'Model call failed', error=error.message)
        for cb in list(self._error_listeners):
            cb(result.error_message)
        return result

    def _changed(self, persist: bool = True) -> None:
        snapshot = self.transcript
        if persist and self.store:
            self._persist(snapshot)
        for cb in list(self._listeners):
            cb(snapshot)

    def _persist(self, snapshot: Tuple[Message, ...]) -> None:
        # a failed save must not end the turn; the next mutation retries
        try:
            self.store.save_transcript(list(snapshot))
        except OSError as e:
            emit('ERROR', 'STORAGE', 'Could not save transcript', error=str(e), messages=len(snapshot))


__all__ = [
    'EngineState',
    'TurnOutcome',
    'TurnResult',
    'CancellationToken',
    'TranscriptEngine',
]
