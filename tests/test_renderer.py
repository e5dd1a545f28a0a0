import io
from concurrent.futures import ThreadPoolExecutor

import pytest

from layoutkit.core.sources import MemoryFileSource
from layoutkit.core.templating import TemplateSet, compose, render, render_fragment
from layoutkit.exceptions import EmptyLayoutError, ExecutionError, ParseError, SourceReadError


@pytest.fixture
def layout(layout_source):
    return compose(layout_source, ["*.html"])


def test_render_round_trip(sink):
    layout = compose(MemoryFileSource({"index.html": "<body>{% include 'page' %}</body>"}), ["*.html"])

    render_fragment(layout, "<p>{{ Msg }}</p>", "page", {"Msg": "hi"}, sink)

    output = sink.getvalue().decode("utf-8")
    assert output == "<p>hi</p>"
    assert "{{" not in output
    assert "page" not in layout


def test_page_extending_the_layout(layout, sink):
    page = (
        "{% extends 'base.html' %}"
        "{% block title %}About{% endblock %}"
        "{% block content %}<h1>{{ heading }}</h1>{% endblock %}"
    )
    render_fragment(layout, page, "pages/about.html", {"heading": "Hello", "nav": ["home", "about"]}, sink)

    assert sink.getvalue().decode("utf-8") == (
        "<html><head><title>About</title></head>"
        "<body><nav><a>home</a><a>about</a></nav>"
        "<main><h1>Hello</h1></main></body></html>"
    )
    assert layout.names() == ["base.html", "partials/nav.html"]


def test_render_reads_page_from_source(layout, sink):
    pages = MemoryFileSource({"pages/home.html": "{% extends 'base.html' %}{% block content %}home{% endblock %}"})
    render(layout, pages, "pages/home.html", None, sink)
    assert b"<main>home</main>" in sink.getvalue()


def test_page_may_override_a_layout_fragment(layout, sink):
    # the page takes the name of a layout partial; base.html picks it up in the clone only.
    render_fragment(layout, "<nav>custom</nav>", "partials/nav.html", None, sink)
    assert sink.getvalue() == b"<nav>custom</nav>"

    buffer = io.StringIO()
    layout.clone().execute("base.html", None, buffer)
    assert "<nav></nav>" in buffer.getvalue()


@pytest.mark.parametrize("empty_layout", [None, TemplateSet()])
def test_empty_layout_writes_nothing(empty_layout, sink):
    with pytest.raises(EmptyLayoutError):
        render_fragment(empty_layout, "<p>x</p>", "page", None, sink)
    with pytest.raises(EmptyLayoutError):
        render(empty_layout, MemoryFileSource({"page": "x"}), "page", None, sink)
    assert sink.getvalue() == b""


def test_missing_page_raises_source_read_error(layout, sink):
    with pytest.raises(SourceReadError) as exc_info:
        render(layout, MemoryFileSource({"other.html": ""}), "pages/missing.html", None, sink)
    assert exc_info.value.path == "pages/missing.html"
    assert sink.getvalue() == b""


def test_page_parse_error(layout, sink):
    with pytest.raises(ParseError):
        render_fragment(layout, "{{ unclosed", "page", None, sink)
    assert sink.getvalue() == b""


def test_execution_error_keeps_partial_output(layout, sink):
    with pytest.raises(ExecutionError):
        render_fragment(layout, "before{{ missing }}after", "page", None, sink)
    assert sink.getvalue() == b"before"


def test_concurrent_renders_share_layout(layout):
    def render_one(i: int) -> str:
        buffer = io.StringIO()
        page = "{% extends 'base.html' %}{% block content %}" + f"page-{i}" + ":{{ n }}{% endblock %}"
        render_fragment(layout, page, f"pages/{i % 3}.html", {"n": i}, buffer)
        return buffer.getvalue()

    with ThreadPoolExecutor(max_workers=8) as pool:
        outputs = list(pool.map(render_one, range(40)))

    for i, output in enumerate(outputs):
        assert f"<main>page-{i}:{i}</main>" in output
    assert layout.names() == ["base.html", "partials/nav.html"]
