"""Temporary input files for tool invocations."""

import shutil
import tempfile
from pathlib import Path
from typing import Optional


class TempFileTracker:
    """
    Owns one temporary directory for the duration of a run.

    Create one per run and dispose of it at the end, or use it as a context
    manager. Every file it created is removed on dispose, whether or not the
    tools that read them succeeded.
    """

    def __init__(self, prefix: str = "docmap_tools_", parent: Optional[Path] = None):
        self.directory = Path(tempfile.mkdtemp(prefix=prefix, dir=parent))
        self._count = 0

    @property
    def count(self) -> int:
        return self._count

    def create_temporary_file(self, content: str = "") -> Path:
        """Create ``input_<n>`` in the temporary directory holding ``content``."""
        if not self.directory.exists():
            raise RuntimeError(f"{self.directory} was already disposed")
        self._count += 1
        path = self.directory / f"input_{self._count}"
        path.write_text(content, encoding="utf-8")
        return path.resolve()

    def dispose(self) -> None:
        """Remove the temporary directory. Safe to call more than once."""
        if self.directory.exists():
            shutil.rmtree(self.directory)

    def __enter__(self) -> "TempFileTracker":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()
