import os
import pytest
from pathlib import Path

from layoutkit.core.sources import DiskFileSource, EmbeddedFileSource, MemoryFileSource, SourceEntry
from layoutkit.exceptions import NotFoundError

EXPECTED_WALK = [
    SourceEntry("README.md", False),
    SourceEntry("base.html", False),
    SourceEntry("partials", True),
    SourceEntry("partials/nav.html", False),
    SourceEntry("partials/notes.txt", False),
]

def test_memory_walk_is_sorted_preorder(layout_source):
    # code point order puts upper case before lower case; dirs precede their contents.
    assert layout_source.list() == EXPECTED_WALK

def test_disk_walk_matches_memory_walk(layout_dir: Path, layout_source):
    assert DiskFileSource(layout_dir).list() == layout_source.list()

def test_embedded_walk_matches_memory_walk(embedded_package: str, layout_source):
    source = EmbeddedFileSource(embedded_package, "templates")
    assert source.list() == layout_source.list()

def test_list_from_subdirectory(layout_source):
    assert layout_source.list("partials") == [
        SourceEntry("partials/nav.html", False),
        SourceEntry("partials/notes.txt", False),
    ]

def test_read_returns_bytes(layout_dir: Path, embedded_package: str):
    disk = DiskFileSource(layout_dir)
    embedded = EmbeddedFileSource(embedded_package)
    assert disk.read("partials/notes.txt") == b"not a template"
    assert embedded.read("partials/notes.txt") == b"not a template"
    assert MemoryFileSource({"a/b.html": "x"}).read("./a/b.html") == b"x"

@pytest.mark.parametrize("path", ["missing.html", "partials", "../base.html", "/etc/passwd", "partials/../../x"])
def test_missing_or_escaping_paths_raise_not_found(path, layout_dir: Path, embedded_package: str, layout_source):
    for source in (DiskFileSource(layout_dir), EmbeddedFileSource(embedded_package), layout_source):
        with pytest.raises(NotFoundError):
            source.read(path)

def test_listing_missing_directory_raises_not_found(tmp_path: Path):
    with pytest.raises(NotFoundError):
        DiskFileSource(tmp_path / "nope").list()
    with pytest.raises(NotFoundError):
        MemoryFileSource({"a.html": ""}).list("nope")

def test_unknown_embedded_package_raises_not_found():
    with pytest.raises(NotFoundError):
        EmbeddedFileSource("layoutkit_no_such_package_here")

def test_memory_source_rejects_paths_outside_root():
    with pytest.raises(ValueError):
        MemoryFileSource({"../evil.html": ""})

def test_disk_walk_does_not_follow_directory_symlinks(tmp_path: Path):
    root = tmp_path / "site"
    (root / "shared").mkdir(parents=True)
    (root / "index.html").write_text("ok")
    (root / "shared" / "a.html").write_text("a")
    os.symlink(root, root / "loop", target_is_directory=True)
    os.symlink(root / "shared", root / "alias", target_is_directory=True)

    assert DiskFileSource(root).list() == [
        SourceEntry("alias", False),
        SourceEntry("index.html", False),
        SourceEntry("loop", False),
        SourceEntry("shared", True),
        SourceEntry("shared/a.html", False),
    ]
