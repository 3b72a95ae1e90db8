from pathlib import Path
from typing import Iterable, List, Sequence, Set

from logging_bus import emit
from models import Document


def _candidates(paths: Iterable[str]) -> List[Path]:
    found = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            found.extend(sorted(p for p in path.rglob('*') if p.is_file()))
        elif path.is_file():
            found.append(path)
        else:
            emit('WARN', 'SYSTEM', 'Skipping missing path', path=str(path))
    return found


def ingest_paths(paths: Iterable[str], existing: Iterable[str] = (),
                 extensions: Sequence[str] = ('.py',)) -> List[Document]:
    """Read selected files (or folders) into documents.

    Only files with a recognized extension are kept; names already held by the
    session, or repeated within the selection, are dropped silently.
    """
    seen: Set[str] = set(existing)
    suffixes = tuple(ext.lower() for ext in extensions)
    documents = []
    for path in _candidates(paths):
        if not path.name.lower().endswith(suffixes):
            continue
        if path.name in seen:
            continue
        try:
            content = path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            emit('WARN', 'SYSTEM', 'Could not read file', path=str(path), error=str(e))
            continue
        seen.add(path.name)
        documents.append(Document(name=path.name, content=content))
    emit('INFO', 'SYSTEM', 'Loaded source files', files=len(documents))
    return documents


__all__ = ['ingest_paths']
