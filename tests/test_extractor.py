from logic.extractor import (
    SCRIPT_SEPARATOR,
    Run,
    TokenKind,
    classify_lines,
    extract,
    tokenize,
)

SAMPLE = (
    "**Part 1: Best Practices & Novelty Analysis**\n"
    "* **Strengths**: tidy helpers\n"
    "- loops are clear\n"
    "See below.\n"
    "```python\nold = 1\n```\n"
    "More prose.\n"
    "**Part 2: The Advanced Super Script**\n"
    "Here it is:\n"
    "```python\nimport os\nprint(os.name)\n```\n"
    "Done."
)


def test_analysis_and_script_split():
    text = "**Part 1...**\nhello\n**Part 2: The Super Script**\n```python\nprint(1)\n```"
    doc = extract(text)
    assert doc.has_script_header
    assert any("hello" in r.text for r in doc.analysis if r.kind == "prose")
    assert doc.script == (Run("code", "print(1)", "python"),)
    assert doc.downloadable_script() == "print(1)"


def test_part_one_title_removed():
    doc = extract(SAMPLE)
    assert all("Part 1" not in text for text in doc.prose_runs)
    assert doc.code_blocks == ["old = 1", "import os\nprint(os.name)"]
    assert doc.script_blocks == ["import os\nprint(os.name)"]


def test_fallback_without_header():
    doc = extract("Just an answer.\n```\nx = 1\n```\nThanks")
    assert not doc.has_script_header
    assert doc.analysis == () and doc.script == ()
    assert [r.kind for r in doc.fallback] == ["prose", "code", "prose"]
    assert doc.fallback[1] == Run("code", "x = 1", "")
    assert doc.downloadable_script() == ""


def test_multiple_script_blocks_joined():
    doc = extract("**The Super Script**\n```python\na = 1\n```\ntext\n```python\nb = 2\n```")
    assert doc.downloadable_script() == "a = 1" + SCRIPT_SEPARATOR + "b = 2"


def test_unterminated_fence_is_prose():
    doc = extract("intro\n```python\nprint(1)")
    assert doc.fallback == (Run("prose", "intro\n```python\nprint(1)"),)


def test_inline_fence():
    doc = extract("use ```x = 1``` here")
    assert doc.fallback == (Run("prose", "use "), Run("code", "x = 1"), Run("prose", " here"))


def test_tokenizer_classes():
    kinds = [t.kind for t in tokenize("a\n```py\nb\n```c")]
    assert kinds == [
        TokenKind.TEXT,
        TokenKind.FENCE_OPEN,
        TokenKind.TEXT,
        TokenKind.FENCE_CLOSE,
        TokenKind.TEXT,
    ]


def test_extract_is_idempotent():
    assert extract(SAMPLE) == extract(SAMPLE)


def test_prose_survives_growth():
    final = extract(SAMPLE).prose_runs
    for end in range(len(SAMPLE) + 1):
        doc = extract(SAMPLE[:end])
        runs = list(doc.runs)
        if runs and runs[-1].kind == "prose":
            # the last run may still be growing
            runs = runs[:-1]
        for run in runs:
            if run.kind == "prose":
                assert run.text in final, (end, run.text)


def test_classify_lines():
    lines = classify_lines("**Title**\n* one\n- two\n\nplain text")
    assert lines == [
        ("heading", "Title"),
        ("bullet", "one"),
        ("bullet", "two"),
        ("paragraph", "plain text"),
    ]
