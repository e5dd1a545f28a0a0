from typing import Dict, Iterator, Mapping, Set, Tuple

from layoutkit.core.sources.base import FileSource
from layoutkit.exceptions import NotFoundError
from layoutkit.util import clean_source_path


class MemoryFileSource(FileSource):
    """In-memory source; directories are implied by the file paths."""

    kind = "memory"

    def __init__(self, files: Mapping[str, bytes | str]):
        self._files: Dict[str, bytes] = {}
        self._dirs: Set[str] = {"."}
        for raw_path, content in files.items():
            path = clean_source_path(raw_path)
            if path is None or path == ".":
                raise ValueError(f"invalid in-memory path: {raw_path!r}")
            self._files[path] = content.encode("utf-8") if isinstance(content, str) else bytes(content)
            parts = path.split("/")
            for i in range(1, len(parts)):
                self._dirs.add("/".join(parts[:i]))

    def _scan_dir(self, path: str) -> Iterator[Tuple[str, bool]]:
        if path not in self._dirs:
            raise NotFoundError(path, f"directory not found: '{path}'")
        prefix = "" if path == "." else f"{path}/"
        seen: Set[str] = set()
        for candidate in (*self._dirs, *self._files):
            if candidate == "." or not candidate.startswith(prefix):
                continue
            rest = candidate[len(prefix):]
            if not rest or "/" in rest or rest in seen:
                continue
            seen.add(rest)
            yield rest, candidate in self._dirs

    def _read_file(self, path: str) -> bytes:
        try:
            return self._files[path]
        except KeyError:
            raise NotFoundError(path, f"file not found: '{path}'") from None

    def __repr__(self) -> str:
        return f"MemoryFileSource(files={len(self._files)})"
