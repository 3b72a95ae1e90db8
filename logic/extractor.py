"""Split a model answer into analysis prose, script prose and fenced code blocks.

The answer is scanned by a small lexer with three token classes: an opening
fence (triple backticks plus an optional language tag), a closing fence and
plain text. A fence that has not been closed yet is rendered as prose, so
re-extracting a growing answer never drops prose that was already shown.
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Sequence, Tuple

FENCE = "```"
SCRIPT_HEADERS = (
    "**Part 2: The Advanced Super Script**",
    "**Part 2: The Super Script**",
    "**The Super Script**",
)
ANALYSIS_HEADERS = (
    "**Part 1: Best Practices & Novelty Analysis**",
    "**Part 1: Best Practices Analysis**",
)
SCRIPT_SEPARATOR = "\n\n# --- Synthesizer: Appended from next code block ---\n\n"

_OPEN_TAIL = re.compile(r"([A-Za-z0-9_+#.-]*)(?:\n|\Z)")


class TokenKind(Enum):
    FENCE_OPEN = "fence_open"
    FENCE_CLOSE = "fence_close"
    TEXT = "text"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    raw: str
    language: str = ""


@dataclass(frozen=True)
class Run:
    kind: str  # "prose" or "code"
    text: str
    language: str = ""


@dataclass(frozen=True)
class StructuredDocument:
    analysis: Tuple[Run, ...] = ()
    script: Tuple[Run, ...] = ()
    fallback: Tuple[Run, ...] = ()
    has_script_header: bool = False

    @property
    def runs(self) -> Tuple[Run, ...]:
        return self.analysis + self.script + self.fallback

    @property
    def prose_runs(self) -> List[str]:
        return [r.text for r in self.runs if r.kind == "prose"]

    @property
    def code_blocks(self) -> List[str]:
        return [r.text for r in self.runs if r.kind == "code"]

    @property
    def script_blocks(self) -> List[str]:
        return [r.text for r in self.script if r.kind == "code"]

    def downloadable_script(self) -> str:
        """Concatenate the script section's code blocks into one file body."""
        return SCRIPT_SEPARATOR.join(self.script_blocks)


def tokenize(text: str) -> Iterator[Token]:
    pos = 0
    inside = False
    while pos < len(text):
        idx = text.find(FENCE, pos)
        if idx == -1:
            yield Token(TokenKind.TEXT, text[pos:])
            return
        if idx > pos:
            yield Token(TokenKind.TEXT, text[pos:idx])
        if inside:
            yield Token(TokenKind.FENCE_CLOSE, FENCE)
            pos = idx + len(FENCE)
        else:
            m = _OPEN_TAIL.match(text, idx + len(FENCE))
            if m:
                yield Token(TokenKind.FENCE_OPEN, text[idx:m.end()], m.group(1))
                pos = m.end()
            else:
                # inline fence such as ```x = 1```
                yield Token(TokenKind.FENCE_OPEN, FENCE)
                pos = idx + len(FENCE)
        inside = not inside


def split_runs(text: str) -> Tuple[Run, ...]:
    """Alternate prose and code runs; whitespace-only prose is dropped."""
    runs: List[Run] = []
    prose: List[str] = []
    code: List[str] = []
    opening: Optional[Token] = None

    def flush_prose() -> None:
        chunk = "".join(prose)
        prose.clear()
        if chunk.strip():
            runs.append(Run("prose", chunk))

    for tok in tokenize(text):
        if tok.kind is TokenKind.FENCE_OPEN:
            opening = tok
            code = []
        elif tok.kind is TokenKind.FENCE_CLOSE:
            body = "".join(code)
            if body.endswith("\n"):
                body = body[:-1]
            flush_prose()
            runs.append(Run("code", body, opening.language))
            opening = None
        elif opening is not None:
            code.append(tok.raw)
        else:
            prose.append(tok.raw)
    if opening is not None:
        # still streaming: show the unterminated block as text
        prose.append(opening.raw)
        prose.extend(code)
    flush_prose()
    return tuple(runs)


def _find_first(text: str, needles: Sequence[str]) -> Optional[Tuple[int, int]]:
    best = None
    for needle in needles:
        idx = text.find(needle)
        if idx != -1 and (best is None or idx < best[0]):
            best = (idx, idx + len(needle))
    return best


def _strip_analysis_header(text: str) -> str:
    found = _find_first(text, ANALYSIS_HEADERS)
    if found is None:
        return text
    return text[:found[0]] + text[found[1]:]


def extract(text: str) -> StructuredDocument:
    header = _find_first(text, SCRIPT_HEADERS)
    if header is None:
        return StructuredDocument(fallback=split_runs(_strip_analysis_header(text)))
    analysis = _strip_analysis_header(text[:header[0]])
    return StructuredDocument(
        analysis=split_runs(analysis),
        script=split_runs(text[header[1]:]),
        has_script_header=True,
    )


def classify_lines(prose: str) -> List[Tuple[str, str]]:
    """Tag each non-blank line as ``heading``, ``bullet`` or ``paragraph``."""
    lines = []
    for line in prose.split("\n"):
        if len(line) >= 4 and line.startswith("**") and line.endswith("**"):
            lines.append(("heading", line[2:-2]))
        elif line.startswith("* ") or line.startswith("- "):
            lines.append(("bullet", line[2:]))
        elif line.strip():
            lines.append(("paragraph", line))
    return lines


__all__ = [
    "Token",
    "TokenKind",
    "Run",
    "StructuredDocument",
    "tokenize",
    "split_runs",
    "extract",
    "classify_lines",
    "SCRIPT_HEADERS",
    "ANALYSIS_HEADERS",
    "SCRIPT_SEPARATOR",
]
