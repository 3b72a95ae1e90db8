import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from models import Message, Role
from .extractor import StructuredDocument, extract

Span = Tuple[int, int]


@dataclass(frozen=True)
class MessageView:
    """One transcript entry as it should be displayed for a search query."""
    index: int
    message: Message
    document: Optional[StructuredDocument]
    highlights: Dict[str, List[Span]]


def _pattern(query: str) -> "re.Pattern[str]":
    return re.compile(re.escape(query), re.IGNORECASE)


def filter_transcript(transcript: Sequence[Message], query: str) -> List[Message]:
    """Return the messages containing ``query`` (case-insensitive), in order."""
    if not query.strip():
        return list(transcript)
    pattern = _pattern(query)
    return [msg for msg in transcript if pattern.search(msg.content)]


def highlight_spans(text: str, query: str) -> List[Span]:
    if not query.strip():
        return []
    return [m.span() for m in _pattern(query).finditer(text)]


def project(transcript: Sequence[Message], query: str) -> List[MessageView]:
    views = []
    pattern = _pattern(query) if query.strip() else None
    for index, msg in enumerate(transcript):
        if pattern is not None and not pattern.search(msg.content):
            continue
        if msg.role == Role.MODEL:
            document = extract(msg.content)
            prose = document.prose_runs
        else:
            document = None
            prose = [msg.content]
        highlights = {}
        if pattern is not None:
            for run in prose:
                spans = highlight_spans(run, query)
                if spans:
                    highlights[run] = spans
        views.append(MessageView(index, msg, document, highlights))
    return views


__all__ = ['MessageView', 'filter_transcript', 'highlight_spans', 'project']
