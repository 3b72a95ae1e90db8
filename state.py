from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from logging_bus import emit
from models import Document
from persistence import SessionStore


@dataclass
class AppState:
    """Documents held by the session and the one shown in the viewer."""
    documents: List[Document] = field(default_factory=list)
    selected_name: Optional[str] = None
    store: Optional[SessionStore] = None

    @classmethod
    def restore(cls, store: SessionStore) -> "AppState":
        documents = store.load_documents()
        state = cls(documents=documents, store=store)
        saved = store.load_selected()
        if saved and any(d.name == saved for d in documents):
            state.selected_name = saved
        elif documents:
            state.selected_name = documents[0].name
        emit('INFO', 'STORAGE', 'Session restored', files=len(documents), selected=state.selected_name)
        return state

    @property
    def names(self) -> List[str]:
        return [d.name for d in self.documents]

    def selected_document(self) -> Optional[Document]:
        for doc in self.documents:
            if doc.name == self.selected_name:
                return doc
        return None

    def add_documents(self, incoming: Iterable[Document]) -> List[Document]:
        """Append documents whose names are new; returns the ones added."""
        known = set(self.names)
        added = []
        for doc in incoming:
            if doc.name in known:
                continue
            known.add(doc.name)
            added.append(doc)
        if not added:
            return added
        self.documents.extend(added)
        if self.selected_name is None:
            self.selected_name = self.documents[0].name
        self._save()
        return added

    def select(self, name: str) -> Optional[Document]:
        if name not in self.names:
            return None
        self.selected_name = name
        if self.store:
            self.store.save_selected(name)
        return self.selected_document()

    def clear(self) -> None:
        self.documents.clear()
        self.selected_name = None
        if self.store:
            self.store.clear()

    def _save(self) -> None:
        if self.store:
            self.store.save_documents(self.documents)
            self.store.save_selected(self.selected_name)


__all__ = ["AppState"]
