import os
from pathlib import Path
from typing import Iterator, Tuple

from layoutkit.core.sources.base import FileSource
from layoutkit.exceptions import NotFoundError


class DiskFileSource(FileSource):
    """Reads templates live from a directory on disk."""

    kind = "disk"

    def __init__(self, root: Path | str):
        self.root = Path(root)

    def _resolve(self, path: str) -> Path:
        return self.root if path == "." else self.root.joinpath(*path.split("/"))

    def _scan_dir(self, path: str) -> Iterator[Tuple[str, bool]]:
        directory = self._resolve(path)
        if not directory.is_dir():
            raise NotFoundError(path, f"directory not found: '{path}' (under {self.root})")
        with os.scandir(directory) as it:
            for entry in it:
                # symlinked directories are reported as plain entries and never entered.
                yield entry.name, entry.is_dir(follow_symlinks=False)

    def _read_file(self, path: str) -> bytes:
        file_path = self._resolve(path)
        try:
            return file_path.read_bytes()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as e:
            raise NotFoundError(path, f"file not found: '{path}' (under {self.root})") from e

    def __repr__(self) -> str:
        return f"DiskFileSource(root={str(self.root)!r})"
