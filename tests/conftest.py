import io
from pathlib import Path
from typing import Dict

import pytest

from layoutkit.core.sources import MemoryFileSource


LAYOUT_FILES: Dict[str, str] = {
    "base.html": (
        "<html><head><title>{% block title %}site{% endblock %}</title></head>"
        "<body>{% include 'partials/nav.html' %}"
        "<main>{% block content %}{% endblock %}</main></body></html>"
    ),
    "partials/nav.html": "<nav>{% for item in nav | default([]) %}<a>{{ item }}</a>{% endfor %}</nav>",
    "partials/notes.txt": "not a template",
    "README.md": "# templates",
}


def write_tree(root: Path, files: Dict[str, str]) -> Path:
    for rel_path, content in files.items():
        target = root.joinpath(*rel_path.split("/"))
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def layout_source():
    return MemoryFileSource(LAYOUT_FILES)


@pytest.fixture
def layout_dir(tmp_path: Path) -> Path:
    """The same layout as `layout_source`, written to disk."""
    return write_tree(tmp_path / "templates", LAYOUT_FILES)


@pytest.fixture
def embedded_package(tmp_path: Path, monkeypatch) -> str:
    """Creates an importable package shipping the layout as package data."""
    package_name = f"demo_site_{tmp_path.name.replace('-', '_')}"
    package_dir = tmp_path / "site_packages" / package_name
    package_dir.mkdir(parents=True)
    (package_dir / "__init__.py").write_text("")
    write_tree(package_dir / "templates", LAYOUT_FILES)
    monkeypatch.syspath_prepend(str(tmp_path / "site_packages"))
    return package_name


@pytest.fixture
def sink():
    return io.BytesIO()


@pytest.fixture
def tree_writer():
    return write_tree
