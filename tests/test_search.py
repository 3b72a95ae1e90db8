from logic.search import filter_transcript, highlight_spans, project
from models import Message, Role

TRANSCRIPT = [
    Message(role=Role.MODEL, content="**Part 2: The Super Script**\nUse Pandas here\n```python\nimport pandas\n```"),
    Message(role=Role.USER, content="Why pandas?"),
    Message(role=Role.MODEL, content="Because it is fast."),
]


def test_empty_query_returns_everything():
    result = filter_transcript(TRANSCRIPT, "")
    assert result == TRANSCRIPT
    assert result is not TRANSCRIPT


def test_filter_is_case_insensitive_and_ordered():
    assert filter_transcript(TRANSCRIPT, "PANDAS") == TRANSCRIPT[:2]
    assert filter_transcript(TRANSCRIPT, "fast") == [TRANSCRIPT[2]]
    assert filter_transcript(TRANSCRIPT, "missing") == []


def test_query_is_literal():
    msgs = [Message(role=Role.USER, content="a.b"), Message(role=Role.USER, content="axb")]
    assert filter_transcript(msgs, ".") == msgs[:1]


def test_highlight_spans():
    assert highlight_spans("Pandas and pandas", "pandas") == [(0, 6), (11, 17)]
    assert highlight_spans("anything", "") == []


def test_project_highlights_prose_only():
    views = project(TRANSCRIPT, "pandas")
    assert [v.index for v in views] == [0, 1]
    model_view = views[0]
    assert model_view.document.has_script_header
    assert model_view.highlights == {"\nUse Pandas here\n": [(5, 11)]}
    assert views[1].document is None
    assert views[1].highlights == {"Why pandas?": [(4, 10)]}


def test_project_without_query_has_no_highlights():
    views = project(TRANSCRIPT, "")
    assert len(views) == 3
    assert all(v.highlights == {} for v in views)
    assert [v.message for v in views] == TRANSCRIPT


def test_blank_query_matches_everything_without_highlights():
    assert filter_transcript(TRANSCRIPT, "   ") == TRANSCRIPT
    assert highlight_spans("a  b", "  ") == []
    views = project(TRANSCRIPT, " ")
    assert len(views) == 3
    assert all(v.highlights == {} for v in views)
