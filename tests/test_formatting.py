import pytest

from citelink.core.exceptions import FormattingError, StyleLoadError
from citelink.core.formatting import EntryFormatter, PybtexFormatter

from conftest import make_record


ARTICLE = make_record(
    "smith20",
    entry_type="article",
    author="Smith, John and Doe, Jane",
    title="First Great Paper",
    journal="Journal of Studies",
    year="2020",
)


def test_pybtex_formatter_renders_markdown() -> None:
    formatter = PybtexFormatter()

    text = formatter.format_record(ARTICLE)

    assert isinstance(formatter, EntryFormatter)
    assert "John Smith" in text
    assert "Jane Doe" in text
    assert "*Journal of Studies*" in text
    assert "2020" in text
    assert not text.endswith("\n")


def test_pybtex_formatter_supports_other_backends() -> None:
    text = PybtexFormatter(style="unsrt", backend="html").format_record(ARTICLE)

    assert "<em>Journal of Studies</em>" in text


@pytest.mark.parametrize(("style", "backend"), [("nope", "markdown"), ("plain", "nope")])
def test_unknown_plugins_raise_style_load_error(style: str, backend: str) -> None:
    with pytest.raises(StyleLoadError):
        PybtexFormatter(style=style, backend=backend)


def test_missing_required_field_raises_formatting_error() -> None:
    record = make_record("bad", entry_type="article", author="Lee, Ann", title="Lost", year="2019")

    with pytest.raises(FormattingError) as excinfo:
        PybtexFormatter().format_record(record)

    assert excinfo.value.key == "bad"
    assert "bad" in str(excinfo.value)


def test_unknown_entry_type_raises_formatting_error() -> None:
    record = make_record("web", entry_type="online", author="Lee, Ann", title="Page", year="2019")

    with pytest.raises(FormattingError):
        PybtexFormatter().format_record(record)


def test_malformed_author_raises_formatting_error() -> None:
    record = make_record(
        "commas",
        entry_type="misc",
        author="Smith, J, Jr, Extra",
        title="Too Many Commas",
        year="2020",
    )

    with pytest.raises(FormattingError) as excinfo:
        PybtexFormatter().format_record(record)

    assert excinfo.value.key == "commas"


def test_corporate_author_is_rendered_whole() -> None:
    record = make_record(
        "bn",
        entry_type="misc",
        author="{Barnes and Noble}",
        title="Catalogue",
        year="2020",
    )

    text = PybtexFormatter().format_record(record)

    assert "Barnes and Noble" in text
    assert "{" not in text
