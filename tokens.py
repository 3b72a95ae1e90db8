"""Prompt size estimates shown before an analysis is sent."""
from typing import List

import tiktoken

from logging_bus import emit


def _simple_tokenize(text: str) -> List[str]:
    return text.split()


def _encoding(model: str) -> "tiktoken.Encoding":
    try:
        return tiktoken.encoding_for_model(model)
    except KeyError:
        return tiktoken.get_encoding("o200k_base")


def estimate_tokens(text: str, model: str = "gpt-4o-mini") -> int:
    """Count tokens with the model's encoding, or whitespace words if it cannot load."""
    try:
        enc = _encoding(model)
    except Exception as e:
        # encodings are downloaded on first use
        emit("WARN", "BUILD", "Token encoding unavailable", model=model, error=str(e))
        return len(_simple_tokenize(text))
    return len(enc.encode(text))


__all__ = ["estimate_tokens"]
