import io

import pytest

from layoutkit.core.templating import TemplateOptions, TemplateSet
from layoutkit.exceptions import ExecutionError, NotFoundError, ParseError, TemplateError


@pytest.fixture
def template_set():
    ts = TemplateSet()
    ts.add_fragment("index.html", "<main>{% include 'body.html' %}</main>")
    ts.add_fragment("body.html", "old body")
    return ts


def run(ts: TemplateSet, name: str, data=None) -> str:
    buffer = io.StringIO()
    ts.execute(name, data, buffer)
    return buffer.getvalue()


def test_first_fragment_is_primary(template_set):
    assert template_set.primary_name == "index.html"
    assert template_set.primary.source.startswith("<main>")
    assert template_set.names() == ["index.html", "body.html"]
    assert "body.html" in template_set
    assert len(template_set) == 2


def test_get_unknown_name_raises_not_found(template_set):
    with pytest.raises(NotFoundError):
        template_set.get("nope.html")
    with pytest.raises(NotFoundError):
        TemplateSet().primary


def test_clone_is_isolated(template_set):
    clone = template_set.clone()
    clone.add_fragment("x", "extra")
    clone.add_fragment("body.html", "cloned body")

    assert template_set.names() == ["index.html", "body.html"]
    assert "x" not in template_set
    assert run(template_set, "index.html") == "<main>old body</main>"
    assert run(clone, "index.html") == "<main>cloned body</main>"
    # untouched fragments are shared, not copied.
    assert clone.get("index.html") is template_set.get("index.html")


def test_overwrite_is_seen_by_callers_after_execution(template_set):
    assert run(template_set, "index.html") == "<main>old body</main>"
    template_set.add_fragment("body.html", "new body")
    assert run(template_set, "index.html") == "<main>new body</main>"
    assert template_set.primary_name == "index.html"


def test_parse_error_names_fragment(template_set):
    with pytest.raises(ParseError) as exc_info:
        template_set.add_fragment("broken.html", "{% if Msg %}never closed")
    assert exc_info.value.path == "broken.html"
    assert "broken.html" not in template_set


def test_frozen_set_rejects_changes(template_set):
    template_set.freeze()
    with pytest.raises(TemplateError):
        template_set.add_fragment("x", "extra")
    assert not template_set.clone().frozen


def test_execute_streams_bytes_to_binary_sink(template_set):
    sink = io.BytesIO()
    template_set.add_fragment("greet.html", "<p>{{ name }} ✓</p>")
    template_set.execute("greet.html", {"name": "Ada"}, sink)
    assert sink.getvalue() == "<p>Ada ✓</p>".encode("utf-8")


def test_autoescape_is_on_by_default(template_set):
    template_set.add_fragment("esc.html", "{{ value }}")
    assert run(template_set, "esc.html", {"value": "<b>"}) == "&lt;b&gt;"

    raw = TemplateSet(TemplateOptions(autoescape=False))
    raw.add_fragment("esc.html", "{{ value }}")
    assert run(raw, "esc.html", {"value": "<b>"}) == "<b>"


def test_non_mapping_data_is_exposed_as_data(template_set):
    class Page:
        title = "About"

    template_set.add_fragment("title.html", "{{ data.title }}")
    assert run(template_set, "title.html", Page()) == "About"


def test_undefined_variable_raises_execution_error(template_set):
    template_set.add_fragment("strict.html", "{{ missing }}")
    with pytest.raises(ExecutionError):
        run(template_set, "strict.html")

    lenient = TemplateSet(TemplateOptions(strict_undefined=False))
    lenient.add_fragment("strict.html", "[{{ missing }}]")
    assert run(lenient, "strict.html") == "[]"


def test_missing_included_fragment_raises_execution_error():
    ts = TemplateSet()
    ts.add_fragment("index.html", "{% include 'ghost.html' %}")
    with pytest.raises(ExecutionError) as exc_info:
        run(ts, "index.html")
    assert exc_info.value.name == "index.html"


def test_execute_unknown_name_raises_not_found(template_set):
    with pytest.raises(NotFoundError):
        run(template_set, "ghost.html")
