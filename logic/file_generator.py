import os
from typing import Optional, Sequence

from errors import InputValidationError
from logging_bus import emit
from models import Message, Role
from .extractor import extract


def script_filename(ext: str = 'py') -> str:
    return f"synthesized_script.{ext.lstrip('.')}"


def latest_script(transcript: Sequence[Message]) -> str:
    """Downloadable script of the most recent model message ('' when none)."""
    for msg in reversed(transcript):
        if msg.role == Role.MODEL:
            return extract(msg.content).downloadable_script()
    return ''


def save_script(folder: str, text: str, ext: str = 'py', filename: Optional[str] = None) -> str:
    """Write the synthesized script into ``folder`` and return its path."""
    if not text.strip():
        raise InputValidationError("There is no synthesized script to save yet.")
    os.makedirs(folder, exist_ok=True)
    path = os.path.join(folder, filename or script_filename(ext))
    with open(path, 'w', encoding='utf-8') as f:
        f.write(text)
    emit('INFO', 'SYSTEM', 'Saved synthesized script', path=path, chars=len(text))
    return path


__all__ = ['script_filename', 'latest_script', 'save_script']
