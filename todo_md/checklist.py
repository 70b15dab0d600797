"""Parsing and line-level editing of markdown checklists.

Every function here is a pure transformation of a document string. A
``TodoItem`` records the line it was parsed from, so it is only meaningful
against that exact snapshot: after ``add_todo`` or ``remove_todo`` changes
the line count, parse again before touching another item.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

logger = logging.getLogger(__name__)

TODO_LINE_RE = re.compile(r"^\s*-\s*\[( |x)\]\s*(.+)$", re.IGNORECASE)
OPEN_MARKER_RE = re.compile(r"^\s*-\s*\[ \]")
MARKER_PREFIX_RE = re.compile(r"^(\s*-\s*\[[ xX]\]\s*).*$")
ANY_MARKER_RE = re.compile(r"^\s*-\s*\[[ x]\]", re.IGNORECASE)

DONE_PREFIX = "- [x]"
OPEN_BULLET = "- [ ] "


@dataclass(frozen=True)
class TodoItem:
    """A checklist line as it appeared in one document snapshot."""

    line_no: int
    raw: str
    done: bool
    text: str


def _split(document: str) -> List[str]:
    return document.split("\n")


def _join(lines: List[str]) -> str:
    return "\n".join(lines)


def _in_range(lines: List[str], item: TodoItem) -> bool:
    if 0 <= item.line_no < len(lines):
        return True
    logger.debug(
        f"Line {item.line_no} is outside a {len(lines)}-line document; leaving it unchanged"
    )
    return False


def parse_todos(document: str) -> List[TodoItem]:
    items: List[TodoItem] = []
    for line_no, line in enumerate(_split(document)):
        match = TODO_LINE_RE.match(line)
        if not match:
            continue
        items.append(
            TodoItem(
                line_no=line_no,
                raw=line,
                done=match.group(1).lower() == "x",
                text=match.group(2).strip(),
            )
        )
    return items


def mark_done(document: str, item: TodoItem) -> str:
    """Rewrite the item's open marker as an un-indented ``- [x]``.

    Lines that are already done or no longer look like an open item are
    returned unchanged.
    """
    lines = _split(document)
    if not _in_range(lines, item):
        return document
    line = lines[item.line_no]
    updated = OPEN_MARKER_RE.sub(DONE_PREFIX, line, count=1)
    if updated == line:
        logger.debug(f"Line {item.line_no} has no open marker: {line!r}")
    lines[item.line_no] = updated
    return _join(lines)


def edit_todo(document: str, item: TodoItem, new_text: str) -> str:
    """Replace the item's label, keeping its indentation and done state."""
    lines = _split(document)
    if not _in_range(lines, item):
        return document
    line = lines[item.line_no]
    match = MARKER_PREFIX_RE.match(line)
    if not match:
        logger.debug(f"Line {item.line_no} is not a checklist item: {line!r}")
        return document
    lines[item.line_no] = match.group(1) + new_text
    return _join(lines)


def remove_todo(document: str, item: TodoItem) -> str:
    lines = _split(document)
    if not _in_range(lines, item):
        return document
    del lines[item.line_no]
    return _join(lines)


def _find_insertion_point(lines: List[str], section_header: Optional[str]) -> Optional[int]:
    if section_header:
        needle = section_header.lower()
        for idx, line in enumerate(lines):
            if needle in line.lower():
                return idx + 1

    for idx in range(len(lines) - 1, -1, -1):
        if ANY_MARKER_RE.match(lines[idx]):
            return idx + 1
    return None


def add_todo(document: str, text: str, section_header: Optional[str] = None) -> str:
    """Insert an open ``- [ ] text`` bullet.

    The bullet goes under the first line containing ``section_header``
    (case-insensitive), else after the last checklist line, skipping any
    blank lines at that point. With neither anchor it becomes the final line.
    """
    lines = _split(document)
    bullet = f"{OPEN_BULLET}{text}"

    insert_at = _find_insertion_point(lines, section_header)
    if insert_at is None:
        lines.append(bullet)
        return _join(lines)

    while insert_at < len(lines) and lines[insert_at].strip() == "":
        insert_at += 1
    lines.insert(insert_at, bullet)
    return _join(lines)
