"""
Filesystem-backed artifact storage.

One store per directory (raw originals, generated thumbnails). Writes go to a
temporary file in the target directory and are renamed into place, so readers
never see a partially written artifact.
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from pathlib import Path

from .errors import StorageError

logger = logging.getLogger(__name__)

_NOT_FOUND = (FileNotFoundError, NotADirectoryError)


class ArtifactStore:
    def __init__(self, root: str | Path):
        self.root = Path(root)

    def __repr__(self) -> str:
        return f"ArtifactStore({str(self.root)!r})"

    def exists(self, path: Path) -> bool:
        """True if a regular file is at ``path``; other stat errors are not misses."""
        try:
            st = os.stat(path)
        except _NOT_FOUND:
            return False
        except OSError as exc:
            raise StorageError(f"stat failed for {path}: {exc}") from exc
        return stat.S_ISREG(st.st_mode)

    def read(self, path: Path) -> bytes:
        try:
            return Path(path).read_bytes()
        except OSError as exc:
            raise StorageError(f"read failed for {path}: {exc}") from exc

    def write_atomic(self, path: Path, data: bytes) -> None:
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        except OSError as exc:
            raise StorageError(f"cannot prepare {path}: {exc}") from exc

        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as handle:
                # mkstemp creates 0600 files
                os.fchmod(handle.fileno(), 0o644)
                handle.write(data)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, path)
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            raise StorageError(f"write failed for {path}: {exc}") from exc
        logger.debug("[store] wrote %s (%d bytes)", path, len(data))

    def is_available(self) -> bool:
        return self.root.is_dir() and os.access(self.root, os.R_OK)

    def list_files(self) -> list[str]:
        """Relative names of regular files below the root, hidden files skipped."""
        if not self.root.is_dir():
            return []
        names = []
        for path in sorted(self.root.rglob("*")):
            rel = path.relative_to(self.root)
            if any(part.startswith(".") for part in rel.parts):
                continue
            if path.is_file():
                names.append(rel.as_posix())
        return names
