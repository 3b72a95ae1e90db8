from models import Document
from persistence import MemoryStore, SessionStore
from state import AppState


def doc(name):
    return Document(name=name, content=f"# {name}")


def test_add_documents_skips_duplicates():
    state = AppState(store=SessionStore(MemoryStore()))
    added = state.add_documents([doc("a.py"), doc("b.py")])
    assert [d.name for d in added] == ["a.py", "b.py"]
    assert state.selected_name == "a.py"
    added = state.add_documents([doc("b.py"), doc("c.py"), doc("c.py")])
    assert [d.name for d in added] == ["c.py"]
    assert state.names == ["a.py", "b.py", "c.py"]
    assert state.store.load_documents() == state.documents


def test_select_and_restore():
    store = SessionStore(MemoryStore())
    state = AppState(store=store)
    state.add_documents([doc("a.py"), doc("b.py")])
    assert state.select("b.py").name == "b.py"
    assert state.select("zzz.py") is None

    restored = AppState.restore(store)
    assert restored.names == ["a.py", "b.py"]
    assert restored.selected_name == "b.py"


def test_restore_with_stale_selection_picks_first():
    store = SessionStore(MemoryStore())
    store.save_documents([doc("a.py")])
    store.save_selected("gone.py")
    assert AppState.restore(store).selected_name == "a.py"


def test_clear():
    backing = MemoryStore()
    state = AppState(store=SessionStore(backing))
    state.add_documents([doc("a.py")])
    state.clear()
    assert state.documents == [] and state.selected_name is None
    assert backing.data == {}
