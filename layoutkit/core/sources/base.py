# layoutkit/core/sources/base.py
"""
The FileSource capability: a read-only tree of template files.

Every backend implements two primitives, ``_scan_dir`` (immediate children of a
directory) and ``_read_file``. The walk itself lives here so that all backends
enumerate in the same order:

* pre-order, depth first;
* entries of each directory sorted by name (plain code point order);
* a directory is yielded before its contents;
* a symlink to a directory is a plain (non-directory) entry and is not
  descended into, so a link cycle cannot make the walk recurse;
* paths are relative, slash-separated, without a leading ``./``.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Tuple

import structlog

from layoutkit.exceptions import NotFoundError, SourceReadError
from layoutkit.util import clean_source_path

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SourceEntry:
    path: str
    is_dir: bool


class FileSource(ABC):
    """Read-only hierarchical resource provider (disk, embedded or in-memory)."""

    #: short label used in log events.
    kind: str = "abstract"

    @abstractmethod
    def _scan_dir(self, path: str) -> Iterable[Tuple[str, bool]]:
        """Yields (name, is_dir) for the children of directory ``path``.

        Raises NotFoundError if ``path`` is not a directory.
        """

    @abstractmethod
    def _read_file(self, path: str) -> bytes:
        """Returns the contents of file ``path`` or raises NotFoundError."""

    def list(self, root: str = ".") -> List[SourceEntry]:
        # enumerates every entry below root in the documented walk order.
        cleaned_root = clean_source_path(root)
        if cleaned_root is None:
            raise NotFoundError(root, f"invalid source root: '{root}'")
        entries = list(self._walk(cleaned_root))
        log.debug("file_source_listed", kind=self.kind, root=cleaned_root, count=len(entries))
        return entries

    def read(self, path: str) -> bytes:
        cleaned = clean_source_path(path)
        if cleaned is None or cleaned == ".":
            raise NotFoundError(path, f"invalid source path: '{path}'")
        try:
            return self._read_file(cleaned)
        except NotFoundError:
            raise
        except OSError as e:
            raise SourceReadError(path, e) from e

    def _walk(self, directory: str) -> Iterator[SourceEntry]:
        try:
            children = sorted(self._scan_dir(directory), key=lambda child: child[0])
        except NotFoundError:
            raise
        except OSError as e:
            raise SourceReadError(directory, e) from e

        for name, is_dir in children:
            child_path = name if directory == "." else f"{directory}/{name}"
            yield SourceEntry(child_path, is_dir)
            if is_dir:
                yield from self._walk(child_path)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
