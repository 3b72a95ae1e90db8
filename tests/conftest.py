import pytest

from config import AppConfig
from logic.transcript_engine import TranscriptEngine
from models import Document, Preferences


class FakeConversation:
    def __init__(self, client, history):
        self.client = client
        self.history = list(history or [])
        self.sent = []

    def send_streaming(self, message):
        self.sent.append(message)
        script = self.client.turns.pop(0)
        for item in script:
            if isinstance(item, Exception):
                raise item
            yield item


class FakeClient:
    """Model client replaying one scripted list of deltas per call."""

    def __init__(self, *turns):
        self.turns = [list(t) for t in turns]
        self.conversations = []

    def create_conversation(self, model_id, history=None):
        conv = FakeConversation(self, history)
        self.conversations.append(conv)
        return conv


@pytest.fixture
def config():
    return AppConfig(api_key="test-key", model="test-model")


@pytest.fixture
def make_engine(config):
    def factory(*turns, store=None):
        client = FakeClient(*turns)
        return TranscriptEngine(config, client=client, store=store), client
    return factory


@pytest.fixture
def documents():
    return [Document(name="a.py", content="print(1)")]


@pytest.fixture
def preferences():
    return Preferences(objective="demo script")
