"""Data types exchanged between the UI, the engine and persistence."""
from __future__ import annotations
from enum import Enum
from pydantic import BaseModel, ConfigDict


class Role(str, Enum):
    USER = "user"
    MODEL = "model"


class DocumentationLevel(str, Enum):
    MINIMAL = "minimal"
    STANDARD = "standard"
    EXTENSIVE = "extensive"


class ArchitecturalStyle(str, Enum):
    AUTO = "auto"
    OOP = "oop"
    FUNCTIONAL = "functional"
    PROCEDURAL = "procedural"


class Document(BaseModel):
    """An uploaded source file; ``name`` is unique within a session."""
    model_config = ConfigDict(frozen=True)
    name: str
    content: str


class Preferences(BaseModel):
    """Questionnaire answers collected once per analysis run."""
    model_config = ConfigDict(frozen=True)
    objective: str
    libraries: str = ""
    documentation: DocumentationLevel = DocumentationLevel.STANDARD
    architecture: ArchitecturalStyle = ArchitecturalStyle.AUTO


class Message(BaseModel):
    model_config = ConfigDict(frozen=True)
    role: Role
    content: str = ""


__all__ = [
    "Role",
    "DocumentationLevel",
    "ArchitecturalStyle",
    "Document",
    "Preferences",
    "Message",
]
