"""Shared file handling for the JSON repositories.

Each store is one JSON array on disk.  Every read-modify-write runs inside
``locked()``, which holds a thread lock and a ``<store>.lock`` file lock,
so CLI processes sharing a data directory take turns as well as threads.
Writes go to a uniquely named temporary file that then replaces the
original: a crash mid-write never leaves a half-written store behind, and
readers never see a partial file.
"""

from __future__ import annotations

import contextlib
import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Iterable, Iterator

from filelock import FileLock


class JsonFile:

    def __init__(self, file_path: Path) -> None:
        self.path = file_path
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._thread_lock = threading.RLock()
        self._file_lock = FileLock(str(file_path) + ".lock")
        self._ensure_file()

    @contextlib.contextmanager
    def locked(self) -> Iterator[None]:
        """Hold the store for one read-modify-write, never across calls."""
        with self._thread_lock, self._file_lock:
            yield

    def load(self) -> list[dict]:
        return json.loads(self.path.read_text(encoding="utf-8"))

    def persist(self, records: list[dict]) -> None:
        """Replace the store with *records*.  Call only inside ``locked()``."""
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=self.path.parent,
            prefix=self.path.name + ".",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            json.dump(records, tmp, indent=2)
            tmp.write("\n")
        try:
            os.replace(tmp.name, self.path)
        except BaseException:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmp.name)
            raise

    def _ensure_file(self) -> None:
        with self.locked():
            if not self.path.exists():
                self.persist([])


def next_id(existing: Iterable[str]) -> str:
    """One past the largest numeric ID; non-numeric IDs are ignored."""
    return str(max((int(i) for i in existing if str(i).isdigit()), default=0) + 1)
