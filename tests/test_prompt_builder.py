import pytest

from errors import InputValidationError
from logic.extractor import ANALYSIS_HEADERS, SCRIPT_HEADERS
from logic.prompt_builder import (
    ANALYSIS_HEADER,
    SCRIPT_HEADER,
    build_analysis_prompt,
    estimate_prompt_tokens,
)
from models import ArchitecturalStyle, Document, DocumentationLevel, Preferences


def test_files_embedded_in_order():
    docs = [Document(name="b.py", content="B = 2"), Document(name="a.py", content="A = 1")]
    prompt = build_analysis_prompt(docs, Preferences(objective="merge"))
    first = prompt.index("--- FILE: b.py ---\n\nB = 2")
    second = prompt.index("--- FILE: a.py ---\n\nA = 1")
    assert first < second


def test_preferences_block():
    prefs = Preferences(
        objective="CLI for CSV",
        documentation=DocumentationLevel.EXTENSIVE,
        architecture=ArchitecturalStyle.FUNCTIONAL,
    )
    prompt = build_analysis_prompt([Document(name="a.py", content="")], prefs)
    assert "**Primary Objective**: CLI for CSV" in prompt
    assert "**Essential Libraries**: User did not specify any." in prompt
    assert "**Documentation Level**: extensive" in prompt
    assert "**Architectural Style**: functional" in prompt


def test_auto_architecture_wording():
    prompt = build_analysis_prompt([Document(name="a.py", content="")], Preferences(objective="x", libraries="pandas"))
    assert "Determine the best style based on the code" in prompt
    assert "**Essential Libraries**: pandas" in prompt


def test_headers_match_extractor():
    assert ANALYSIS_HEADER in ANALYSIS_HEADERS
    assert SCRIPT_HEADER in SCRIPT_HEADERS
    prompt = build_analysis_prompt([Document(name="a.py", content="{braces}")], Preferences(objective="x"))
    assert SCRIPT_HEADER in prompt and "{braces}" in prompt


def test_empty_documents_rejected():
    with pytest.raises(InputValidationError):
        build_analysis_prompt([], Preferences(objective="x"))


def test_token_estimate(monkeypatch):
    monkeypatch.setattr("logic.prompt_builder.estimate_tokens", lambda text, model: len(text))
    docs = [Document(name="a.py", content="print(1)")]
    prefs = Preferences(objective="x")
    assert estimate_prompt_tokens(docs, prefs, "m") == len(build_analysis_prompt(docs, prefs))
