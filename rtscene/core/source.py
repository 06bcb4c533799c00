from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

from .errors import UnreadableSource


@runtime_checkable
class ByteSource(Protocol):
    def read(self) -> bytes: ...


@dataclass(frozen=True)
class FileSource:
    """Reads a whole local file, refusing non-regular files and oversized ones."""
    path: Path
    max_bytes: Optional[int] = None

    def read(self) -> bytes:
        path = Path(self.path)
        try:
            if not path.is_file():
                raise UnreadableSource("not a regular file", str(path))
            size = path.stat().st_size
            if self.max_bytes is not None and size > self.max_bytes:
                raise UnreadableSource(f"file too large ({size} bytes > {self.max_bytes})", str(path))
            return path.read_bytes()
        except OSError as exc:
            raise UnreadableSource(f"cannot read file: {exc.strerror or exc}", str(path)) from exc
