"""OpenAI-backed chat conversations that stream text deltas."""
import time
from typing import Dict, Iterator, List, Optional, Protocol

from openai import OpenAI

from logging_bus import emit

SYSTEM_PROMPT = "You are an expert Python developer and senior code architect."

# transcript role -> chat completions role
_ROLE_MAP = {"user": "user", "model": "assistant"}


class Conversation(Protocol):
    def send_streaming(self, message: str) -> Iterator[str]: ...


class ModelClient(Protocol):
    def create_conversation(self, model_id: str, history: Optional[List[Dict[str, str]]] = None) -> Conversation: ...


class OpenAIConversation:
    """A chat context whose history grows with every exchange.

    ``history`` entries are ``{"role": "user" | "model", "text": ...}`` pairs,
    the same shape the transcript is replayed in when a context is rebuilt.
    """

    def __init__(self, client: OpenAI, model: str, history: Optional[List[Dict[str, str]]] = None,
                 temperature: float = 0.7, max_tokens: int = 4096):
        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.history: List[Dict[str, str]] = [dict(h) for h in (history or [])]

    def _messages(self, message: str) -> List[Dict[str, str]]:
        messages = [{"role": "system", "content": SYSTEM_PROMPT}]
        for item in self.history:
            messages.append({"role": _ROLE_MAP[item["role"]], "content": item["text"]})
        messages.append({"role": "user", "content": message})
        return messages

    def _record(self, message: str, reply: str) -> None:
        self.history.append({"role": "user", "text": message})
        if reply:
            self.history.append({"role": "model", "text": reply})

    def send_streaming(self, message: str) -> Iterator[str]:
        """Yield text deltas for ``message``; the request is made on first iteration.

        The exchange joins the history only when the stream runs to the end.
        """
        emit("INFO", "NETWORK", "Sending request", model=self.model, history=len(self.history))
        start = time.time()
        stream = self.client.chat.completions.create(
            model=self.model,
            messages=self._messages(message),
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            stream=True,
        )
        parts: List[str] = []
        try:
            for chunk in stream:
                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta
                if delta and delta.content:
                    parts.append(delta.content)
                    yield delta.content
        except GeneratorExit:
            emit("WARN", "STREAM", "Stream closed early", chunks=len(parts))
            stream.close()
            raise
        self._record(message, "".join(parts))
        emit("INFO", "NETWORK", "Request complete", latency_ms=int((time.time() - start) * 1000))


class OpenAIModelClient:
    def __init__(self, api_key: str, temperature: float = 0.7, max_tokens: int = 4096):
        self.client = OpenAI(api_key=api_key)
        self.temperature = temperature
        self.max_tokens = max_tokens

    def create_conversation(self, model_id: str, history: Optional[List[Dict[str, str]]] = None) -> OpenAIConversation:
        emit("INFO", "NETWORK", "Opening conversation", model=model_id, seeded=bool(history))
        return OpenAIConversation(self.client, model_id, history, self.temperature, self.max_tokens)


__all__ = ["Conversation", "ModelClient", "OpenAIConversation", "OpenAIModelClient", "SYSTEM_PROMPT"]
