import textwrap

import pytest

from citelink.core import (
    NO_MARKERS_NOTE,
    NO_MATCHES_NOTE,
    BibliographyCollection,
    BibliographyParseError,
    CitationConfig,
    StyleLoadError,
    process_document,
    process_markdown_and_bibtex,
)
from citelink.core.diagnostics import NullEmitter

from conftest import KeyTitleFormatter, make_records


TEST_BIB = """
@misc{Test21,
  author = {Test Author},
  title = {Test Title},
  year = {2021},
}
"""

SMITH_BIB = textwrap.dedent(
    """
    @article{smith_bravo,
      author = {Smith, John and Collaborator, Jane},
      title = {Bravo},
      journal = {Journal of Studies},
      year = {2020},
    }
    @article{smith_alpha,
      author = {Smith, John},
      title = {Alpha},
      journal = {Journal of Studies},
      year = {2020},
    }
    @book{doe_book,
      author = {Doe, Jane},
      title = {A Book on Everything},
      publisher = {Open Books},
      year = {2021},
    }
    """
)


def test_exact_match_scenario() -> None:
    result = process_markdown_and_bibtex(
        "This is a test with @Test21.", TEST_BIB, emitter=NullEmitter()
    )

    assert result.document == "This is a test with [Test21](#test21)."
    assert result.bibliography.startswith("# Bibliography\n")
    assert result.bibliography.count("## <a name=") == 1
    assert '## <a name="test21"></a>' in result.bibliography
    assert "test title" in result.bibliography.lower()
    assert result.diagnostics == ()


def test_link_prefix_is_prepended() -> None:
    result = process_markdown_and_bibtex(
        "See @Smith20 and @Doe21.", SMITH_BIB, link_prefix="bib.html", emitter=NullEmitter()
    )

    assert result.document == "See [Smith20](bib.html#smith20) and [Doe21](bib.html#doe21)."


def test_disambiguation_scenario() -> None:
    result = process_markdown_and_bibtex(
        "@Smith20 @Smith20b @Smith20c", SMITH_BIB, emitter=NullEmitter()
    )

    assert result.resolutions["@Smith20"].record.key == "smith_alpha"
    assert result.resolutions["@Smith20b"].record.key == "smith_bravo"
    assert result.unresolved == ["@Smith20c"]
    assert "@Smith20c [Reference Not Found]" in result.document
    assert [d.kind for d in result.diagnostics] == ["suffix-out-of-range"]
    alpha = result.bibliography.index('name="smith20"')
    bravo = result.bibliography.index('name="smith20b"')
    assert alpha < bravo


def test_unknown_key_scenario() -> None:
    bib = "@article{somekey, author={Someone}, year={2023}, title={Title}, journal={J}}"
    result = process_markdown_and_bibtex("Cite @Unknown24.", bib, emitter=NullEmitter())

    assert result.document == "Cite @Unknown24 [Reference Not Found]."
    assert NO_MATCHES_NOTE in result.bibliography
    assert "somekey" not in result.bibliography
    assert [(d.kind, d.marker) for d in result.diagnostics] == [
        ("unresolved-marker", "@Unknown24")
    ]


def test_fuzzy_match_scenario() -> None:
    result = process_markdown_and_bibtex(
        "@Smyth20b and @Smithsonian20", SMITH_BIB, emitter=NullEmitter()
    )

    assert result.resolutions["@Smyth20b"].record.key == "smith_bravo"
    assert "[Smyth20b](#smith20b)" in result.document
    assert result.unresolved == ["@Smithsonian20"]


def test_no_markers_pass_through_unchanged() -> None:
    text = "Plain text with an email@example.com and no citations.\n"
    result = process_markdown_and_bibtex(text, SMITH_BIB, emitter=NullEmitter())

    assert result.document is text
    assert result.bibliography == f"# Bibliography\n\n{NO_MARKERS_NOTE}\n"
    assert result.resolutions == {}


def test_empty_inputs_are_not_errors() -> None:
    result = process_markdown_and_bibtex("", "", emitter=NullEmitter())

    assert result.document == ""
    assert NO_MARKERS_NOTE in result.bibliography
    assert result.diagnostics == ()


def test_multi_citation_ordering_ignores_document_order() -> None:
    result = process_markdown_and_bibtex(
        "@Smith20b, @Doe21 and @Smith20.", SMITH_BIB, emitter=NullEmitter()
    )

    anchors = [
        line.split('"')[1] for line in result.bibliography.splitlines() if line.startswith("## ")
    ]
    assert anchors == ["doe21", "smith20", "smith20b"]


def test_runs_are_byte_identical() -> None:
    text = "@Smyth20 @Smith20b @Doe21 @Nobody99 @Smith20"
    first = process_markdown_and_bibtex(text, SMITH_BIB, emitter=NullEmitter())
    second = process_markdown_and_bibtex(text, SMITH_BIB, emitter=NullEmitter())

    assert first.document == second.document
    assert first.bibliography == second.bibliography
    assert first.diagnostics == second.diagnostics


def test_malformed_bibtex_is_fatal() -> None:
    with pytest.raises(BibliographyParseError):
        process_markdown_and_bibtex("@Smith20", "@article{broken, title = {Unclosed", emitter=NullEmitter())


def test_unknown_style_is_fatal() -> None:
    with pytest.raises(StyleLoadError):
        process_markdown_and_bibtex("@Smith20", SMITH_BIB, style="no-such-style")


def test_formatting_error_is_isolated() -> None:
    bib = SMITH_BIB + "\n@article{lee_nojournal, author = {Lee, Ann}, title = {Lost}, year = {2019}}\n"
    result = process_markdown_and_bibtex("@Lee19 @Doe21", bib, emitter=NullEmitter())

    assert "*(Formatting error for entry 'lee_nojournal':" in result.bibliography
    assert '## <a name="doe21"></a>' in result.bibliography
    assert [d.kind for d in result.diagnostics] == ["formatting-error"]
    assert result.document == "[Lee19](#lee19) [Doe21](#doe21)"


def test_records_missing_author_or_year_are_reported() -> None:
    records = make_records(
        {
            "anon": {"title": "Anonymous", "year": "2020"},
            "doe": {"author": "Doe, Jane", "year": "2021", "title": "Solo"},
        }
    )
    result = process_document(
        "@Doe21", records, KeyTitleFormatter(), emitter=NullEmitter()
    )

    assert result.document == "[Doe21](#doe21)"
    assert [(d.kind, d.key) for d in result.diagnostics] == [("record-missing-author", "anon")]


def test_config_controls_rendering() -> None:
    config = CitationConfig(
        link_prefix="refs.md",
        bibliography_title="References",
        fuzzy_matching=False,
        unresolved_template="<!-- missing {marker} -->",
    )
    records = make_records({"s": {"author": "Smith, J", "year": "2020", "title": "Alpha"}})

    result = process_document(
        "@Smith20 @Smyth20", records, KeyTitleFormatter(), config=config, emitter=NullEmitter()
    )

    assert result.document == "[Smith20](refs.md#smith20) <!-- missing @Smyth20 -->"
    assert result.bibliography.startswith("# References\n")
    assert result.combined == f"{result.document}\n\n{result.bibliography}"


def test_collection_issues_become_diagnostics(tmp_path) -> None:
    empty = tmp_path / "empty.bib"
    empty.write_text("% nothing here\n", encoding="utf-8")
    collection = BibliographyCollection()
    collection.load_files([empty])

    result = process_document("@Doe21", collection, KeyTitleFormatter(), emitter=NullEmitter())

    kinds = [d.kind for d in result.diagnostics]
    assert kinds == ["bibliography-issue", "unresolved-marker"]


class ExplodingFormatter(KeyTitleFormatter):
    def format_record(self, record):
        if record.key == "smith":
            raise RuntimeError("engine crashed")
        return super().format_record(record)


def test_unexpected_formatter_failure_is_isolated() -> None:
    records = make_records(
        {
            "smith": {"author": "Smith, J", "year": "2020", "title": "Alpha"},
            "doe": {"author": "Doe, Jane", "year": "2021", "title": "Solo"},
        }
    )

    result = process_document(
        "@Smith20 @Doe21", records, ExplodingFormatter(), emitter=NullEmitter()
    )

    assert (
        '## <a name="smith20"></a>*(Formatting error for entry \'smith\': engine crashed)*'
        in result.bibliography
    )
    assert '## <a name="doe21"></a>doe: Solo' in result.bibliography
    assert [(d.kind, d.key) for d in result.diagnostics] == [("formatting-error", "smith")]
    assert result.document == "[Smith20](#smith20) [Doe21](#doe21)"


def test_malformed_author_name_is_isolated() -> None:
    records = make_records(
        {
            "commas": {"author": "Smith, J, Jr, Extra", "year": "2020", "title": "Odd"},
            "doe": {"author": "Doe, Jane", "year": "2021", "title": "Solo"},
        }
    )

    result = process_document("@Smith20 @Doe21", records, emitter=NullEmitter())

    assert "*(Formatting error for entry 'commas':" in result.bibliography
    assert '## <a name="doe21"></a>' in result.bibliography
    assert "Formatting error for entry 'doe'" not in result.bibliography
    assert [d.kind for d in result.diagnostics] == ["formatting-error"]


def test_corporate_author_survives_parsing() -> None:
    bib = textwrap.dedent(
        """
        @misc{bn,
          author = {{Barnes and Noble}},
          title = {Catalogue},
          year = {2020},
        }
        """
    )

    result = process_markdown_and_bibtex(
        "See @BarnesAndNoble20 and @Barnes20.", bib, emitter=NullEmitter()
    )

    assert result.resolutions["@BarnesAndNoble20"].record.key == "bn"
    assert result.unresolved == ["@Barnes20"]
    assert '## <a name="barnesandnoble20"></a>' in result.bibliography
    assert "Barnes and Noble" in result.bibliography
    assert "Formatting error" not in result.bibliography
    assert [d.kind for d in result.diagnostics] == ["unresolved-marker"]


def test_latex_accented_surname_resolves() -> None:
    bib = r"@misc{mueller, author = {M{\"u}ller, Hans}, title = {Umlaut}, year = {2019}}"

    result = process_markdown_and_bibtex("@Muller19", bib, emitter=NullEmitter())

    assert result.document == "[Muller19](#muller19)"
    assert "Formatting error" not in result.bibliography
    assert result.diagnostics == ()


def test_inline_bibtex_is_sanitised_like_files() -> None:
    bib = (
        "@misc{html, author = {Smith, John}, title = {<i>Alpha</i> &amp; Omega}, "
        "year = {2020}}"
    )

    result = process_markdown_and_bibtex("@Smith20", bib, emitter=NullEmitter())

    assert result.resolutions["@Smith20"].record.get("title") == "Alpha & Omega"
    assert "<i>" not in result.bibliography
