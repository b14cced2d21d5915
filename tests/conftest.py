from __future__ import annotations

import queue
import sys
import threading
from pathlib import Path

_START = Path(__file__).resolve().parent
_repo_root = _START
while _repo_root != _repo_root.parent and not (_repo_root / "quadrant_canvas" / "__init__.py").exists():
    _repo_root = _repo_root.parent

sys.path.insert(0, str(_repo_root))


def call_with_deadline(fn, seconds: float = 10.0):
    """Run ``fn`` on a worker thread; raise ``queue.Empty`` if it does not finish in time."""
    q: "queue.Queue" = queue.Queue()
    threading.Thread(target=lambda: q.put(fn()), daemon=True).start()
    return q.get(timeout=seconds)
