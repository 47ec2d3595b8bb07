"""Bibliography-related CLI helpers."""

from __future__ import annotations

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from citelink.core.bibliography import BibliographyCollection
from citelink.core.index import CandidateIndex
from citelink.core.records import BibliographyRecord
from citelink.core.resolver import make_anchor


def build_reference_panel(record: BibliographyRecord, *, sources: list[str] | None = None) -> Panel:
    """Create a Rich panel that visualises a single bibliography record."""
    fields = dict(record.fields)
    grid = Table.grid(padding=(0, 1))
    grid.add_column(style="bold green", no_wrap=True)
    grid.add_column()

    def _add_field(label: str, value: object) -> None:
        if value is None:
            return
        if isinstance(value, str) and not value.strip():
            return
        grid.add_row(label, str(value))

    for label, name in (("Title", "title"), ("Year", "year"), ("Authors", "author")):
        _add_field(label, fields.pop(name, None))
    journal = fields.pop("journal", None) or fields.pop("booktitle", None)
    _add_field("Journal", journal)
    if sources:
        _add_field("Sources", ", ".join(sources))
    for name, value in sorted(fields.items()):
        _add_field(name.title(), value)

    return Panel(grid, title=f"{record.key} ({record.entry_type})", box=box.SIMPLE)


def build_index_table(index: CandidateIndex) -> Table:
    """Tabulate every candidate group with the marker and anchor of each slot."""
    table = Table(
        title="Citation Keys",
        box=box.SIMPLE,
        show_edge=True,
        header_style="bold cyan",
    )
    table.add_column("Marker", style="bold", no_wrap=True)
    table.add_column("Anchor", no_wrap=True)
    table.add_column("Entry", no_wrap=True)
    table.add_column("Title", overflow="fold")
    for key in index:
        for position, record in enumerate(index[key]):
            suffix = chr(ord("a") + position) if position else ""
            table.add_row(
                f"@{key.surname.capitalize()}{key.year_suffix}{suffix}",
                make_anchor(key.surname, key.year_suffix, position),
                record.key,
                record.get("title") or "",
            )
    return table


def print_bibliography_overview(
    collection: BibliographyCollection,
    *,
    details: bool = False,
    console: Console | None = None,
) -> None:
    console = console or Console()
    index = CandidateIndex.build(collection.records())

    stats = collection.file_stats
    if stats:
        stats_table = Table(
            title="Bibliography Files",
            box=box.SIMPLE,
            show_edge=True,
            header_style="bold cyan",
        )
        stats_table.add_column("File", overflow="fold")
        stats_table.add_column("Entries", justify="right")
        for file_path, entry_count in stats:
            stats_table.add_row(str(file_path), str(entry_count))
        console.print(stats_table)

    warnings = [(issue.key, issue.message) for issue in collection.issues]
    warnings.extend((diagnostic.key, diagnostic.message) for diagnostic in index.skipped)
    if warnings:
        issue_table = Table(
            title="Warnings",
            box=box.SIMPLE,
            header_style="bold yellow",
            show_edge=True,
        )
        issue_table.add_column("Key", style="yellow", no_wrap=True)
        issue_table.add_column("Message", style="yellow")
        for key, message in warnings:
            issue_table.add_row(key or "-", message)
        console.print(issue_table)

    if not len(index):
        console.print("[dim]No citable references found.[/]")
        return

    console.print(build_index_table(index))

    if details:
        for record in collection.records():
            console.print(build_reference_panel(record, sources=collection.sources(record.key)))
            console.print()


__all__ = ["build_index_table", "build_reference_panel", "print_bibliography_overview"]
