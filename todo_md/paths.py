from __future__ import annotations

import os
from pathlib import Path


def expand_home(p: str) -> str:
    """Expand a leading ``~`` or ``~/`` to the user's home directory.

    Other paths, including ``~user`` forms, are returned verbatim.
    """
    if not p:
        return p
    home = str(Path.home())
    if p == "~":
        return home
    if p.startswith("~/"):
        return os.path.normpath(os.path.join(home, p[2:]))
    return p
