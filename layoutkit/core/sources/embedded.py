# layoutkit/core/sources/embedded.py
"""
Templates bundled inside an installed Python package.

Shipping templates as package data is how a Python application "embeds" its
resources at build time; they are read back through ``importlib.resources``
whether the package lives on disk or inside a zip.
"""
import importlib.resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Iterator, Tuple

from layoutkit.core.sources.base import FileSource
from layoutkit.exceptions import NotFoundError


class EmbeddedFileSource(FileSource):
    kind = "embedded"

    def __init__(self, package: str, subdir: str = "templates"):
        self.package = package
        self.subdir = subdir
        try:
            self._root = importlib.resources.files(package)
        except ModuleNotFoundError as e:
            raise NotFoundError(package, f"embedded package not importable: '{package}'") from e
        if subdir and subdir != ".":
            self._root = self._root.joinpath(*subdir.strip("/").split("/"))

    def _resolve(self, path: str) -> Traversable:
        return self._root if path == "." else self._root.joinpath(*path.split("/"))

    def _scan_dir(self, path: str) -> Iterator[Tuple[str, bool]]:
        directory = self._resolve(path)
        if not directory.is_dir():
            raise NotFoundError(path, f"embedded directory not found: '{path}' (in {self.package}/{self.subdir})")
        for child in directory.iterdir():
            # interpreter caches are not resources.
            if child.name == "__pycache__":
                continue
            # packages installed on disk may contain symlinks; zip resources cannot.
            is_link = isinstance(child, Path) and child.is_symlink()
            yield child.name, child.is_dir() and not is_link

    def _read_file(self, path: str) -> bytes:
        resource = self._resolve(path)
        if not resource.is_file():
            raise NotFoundError(path, f"embedded file not found: '{path}' (in {self.package}/{self.subdir})")
        return resource.read_bytes()

    def __repr__(self) -> str:
        return f"EmbeddedFileSource(package={self.package!r}, subdir={self.subdir!r})"
