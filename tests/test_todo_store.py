from __future__ import annotations

from pathlib import Path

import pytest

from todo_md.todo_store import DEFAULT_TODO_TEMPLATE, TodoFileStore, TodoStoreError


def test_ensure_creates_template_and_parents(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "dir" / "TODO.md"
    store = TodoFileStore(path)

    assert store.ensure() is True
    assert path.read_text(encoding="utf-8") == DEFAULT_TODO_TEMPLATE
    assert store.location == str(path)

    # existing files are left alone
    path.write_text("# Mine\n", encoding="utf-8")
    assert store.ensure() is False
    assert path.read_text(encoding="utf-8") == "# Mine\n"


def test_read_creates_missing_file(tmp_path: Path) -> None:
    store = TodoFileStore(tmp_path / "TODO.md")
    assert store.read() == "# TODO\n\n- [ ] My first task\n"


def test_write_replaces_content(tmp_path: Path) -> None:
    store = TodoFileStore(tmp_path / "TODO.md")
    store.write("- [ ] one\n- [x] two")
    assert store.read() == "- [ ] one\n- [x] two"


def test_errors_are_wrapped(tmp_path: Path) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("file", encoding="utf-8")
    store = TodoFileStore(blocker / "TODO.md")

    with pytest.raises(TodoStoreError) as exc_info:
        store.read()
    assert exc_info.value.path == blocker / "TODO.md"
    assert isinstance(exc_info.value.__cause__, OSError)

    with pytest.raises(TodoStoreError):
        store.write("x")


def test_read_replaces_invalid_utf8(tmp_path: Path) -> None:
    path = tmp_path / "TODO.md"
    path.write_bytes(b"# TODO\n- [ ] caf\xe9\n")
    assert TodoFileStore(path).read() == "# TODO\n- [ ] caf\ufffd\n"
