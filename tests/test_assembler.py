from citelink.core.assembler import (
    NO_MARKERS_NOTE,
    NO_MATCHES_NOTE,
    BibliographyAssembler,
    collect_entries,
)
from citelink.core.diagnostics import DiagnosticRecorder, NullEmitter
from citelink.core.index import CandidateIndex
from citelink.core.resolver import Resolver
from citelink.core.scanner import scan_markers

from conftest import KeyTitleFormatter, make_records


PAYLOAD = {
    "zed": {"author": "Zed, Z", "year": "2001", "title": "Last"},
    "smith-b": {"author": "Smith, J", "year": "2020", "title": "Bravo"},
    "smith-a": {"author": "Smith, J", "year": "2020", "title": "Alpha"},
    "adams": {"author": "Adams, A", "year": "2019", "title": "First"},
}


def _resolutions(text: str):
    resolver = Resolver(CandidateIndex.build(make_records(PAYLOAD)))
    return resolver.resolve_all(scan_markers(text)).values()


def test_entries_follow_surname_year_index_order(formatter: KeyTitleFormatter) -> None:
    assembler = BibliographyAssembler(formatter)

    text = assembler.assemble(_resolutions("@Zed01 @Smith20b @Adams19 @Smith20"), markers_found=True)

    assert text.splitlines() == [
        "# Bibliography",
        "",
        '## <a name="adams19"></a>adams: First',
        "",
        '## <a name="smith20"></a>smith-a: Alpha',
        "",
        '## <a name="smith20b"></a>smith-b: Bravo',
        "",
        '## <a name="zed01"></a>zed: Last',
    ]


def test_records_cited_several_ways_appear_once(formatter: KeyTitleFormatter) -> None:
    resolutions = list(_resolutions("@Smith20 @Smith20a @SMITH20 @Smyth20"))

    assert [item.record.key for item in collect_entries(resolutions)] == ["smith-a"]

    BibliographyAssembler(formatter).assemble(resolutions, markers_found=True)
    assert formatter.calls == ["smith-a"]


def test_empty_states_are_distinguished(formatter: KeyTitleFormatter) -> None:
    assembler = BibliographyAssembler(formatter, title="References")

    assert assembler.assemble((), markers_found=False) == f"# References\n\n{NO_MARKERS_NOTE}\n"
    unresolved = _resolutions("@Nobody10")
    assert assembler.assemble(unresolved, markers_found=True) == f"# References\n\n{NO_MATCHES_NOTE}\n"


def test_formatting_failure_yields_placeholder() -> None:
    recorder = DiagnosticRecorder(NullEmitter())
    assembler = BibliographyAssembler(KeyTitleFormatter(failing={"adams"}), recorder=recorder)

    text = assembler.assemble(_resolutions("@Adams19 @Zed01"), markers_found=True)

    assert "## <a name=\"adams19\"></a>*(Formatting error for entry 'adams': boom)*" in text
    assert '## <a name="zed01"></a>zed: Last' in text
    assert [(d.kind, d.key, d.marker) for d in recorder.diagnostics] == [
        ("formatting-error", "adams", "@Adams19")
    ]
