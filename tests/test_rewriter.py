from citelink.core.index import CandidateIndex
from citelink.core.resolver import Resolver
from citelink.core.rewriter import rewrite_document
from citelink.core.scanner import scan_markers

from conftest import make_records


PAYLOAD = {
    "a": {"author": "Smith, J", "year": "2020", "title": "Alpha"},
    "b": {"author": "Smith, J", "year": "2020", "title": "Bravo"},
}


def _rewrite(text: str, **options: str) -> str:
    markers = scan_markers(text)
    resolutions = Resolver(CandidateIndex.build(make_records(PAYLOAD))).resolve_all(markers)
    return rewrite_document(text, markers, resolutions, **options)


def test_resolved_markers_become_links() -> None:
    result = _rewrite("As @Smith20 and @Smith20b showed.", link_prefix="refs.html")

    assert result == "As [Smith20](refs.html#smith20) and [Smith20b](refs.html#smith20b) showed."


def test_every_occurrence_is_rewritten() -> None:
    result = _rewrite("(@Smith20b), @Smith20b; @Smith20b!")

    assert result == "([Smith20b](#smith20b)), [Smith20b](#smith20b); [Smith20b](#smith20b)!"


def test_suffix_a_is_dropped_from_label_and_anchor() -> None:
    assert _rewrite("@Smith20a") == "[Smith20](#smith20)"


def test_unresolved_markers_stay_visible() -> None:
    assert _rewrite("Cite @Unknown24.") == "Cite @Unknown24 [Reference Not Found]."
    assert _rewrite("@Smith20c", unresolved_template="**{marker}?**") == "**@Smith20c?**"


def test_text_outside_markers_is_preserved() -> None:
    text = "Ünïcödé — «@Smith20» \r\n\tend @Smith2020 me@Host.org"

    assert _rewrite(text) == "Ünïcödé — «[Smith20](#smith20)» \r\n\tend @Smith2020 me@Host.org"


def test_text_without_markers_is_returned_unchanged() -> None:
    text = "Nothing to see here."
    assert _rewrite(text) is text
