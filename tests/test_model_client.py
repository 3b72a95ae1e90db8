from types import SimpleNamespace

from services.model_client import SYSTEM_PROMPT, OpenAIConversation


def chunk(text):
    return SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=text))])


class FakeStream:
    def __init__(self, parts):
        self.parts = parts
        self.closed = False

    def __iter__(self):
        return iter(self.parts)

    def close(self):
        self.closed = True


class FakeOpenAI:
    def __init__(self, parts):
        self.calls = []
        self.stream = FakeStream(parts)
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self.create))

    def create(self, **kwargs):
        self.calls.append(kwargs)
        return self.stream


def test_stream_yields_text_and_records_history():
    client = FakeOpenAI([chunk("Hel"), chunk(None), SimpleNamespace(choices=[]), chunk("lo")])
    conv = OpenAIConversation(client, "m", history=[{"role": "model", "text": "earlier"}])
    deltas = conv.send_streaming("hi")
    assert client.calls == []
    assert list(deltas) == ["Hel", "lo"]
    call = client.calls[0]
    assert call["stream"] is True
    assert call["messages"] == [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "assistant", "content": "earlier"},
        {"role": "user", "content": "hi"},
    ]
    assert conv.history[-2:] == [{"role": "user", "text": "hi"}, {"role": "model", "text": "Hello"}]


def test_closing_early_closes_stream():
    client = FakeOpenAI([chunk("a"), chunk("b"), chunk("c")])
    conv = OpenAIConversation(client, "m")
    deltas = conv.send_streaming("go")
    assert next(deltas) == "a"
    deltas.close()
    assert client.stream.closed
    assert conv.history == []
