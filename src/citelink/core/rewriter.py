"""Replace citation markers in the source text with bibliography links."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from .config import DEFAULT_UNRESOLVED_TEMPLATE
from .resolver import Resolution, Resolved
from .scanner import CitationMarker


def render_link(label: str, link_prefix: str, anchor: str) -> str:
    return f"[{label}]({link_prefix}#{anchor})"


def rewrite_document(
    text: str,
    markers: Iterable[CitationMarker],
    resolutions: Mapping[str, Resolution],
    *,
    link_prefix: str = "",
    unresolved_template: str = DEFAULT_UNRESOLVED_TEMPLATE,
) -> str:
    """Return ``text`` with every marker occurrence replaced in one pass.

    Characters outside marker spans are copied through unchanged.
    """
    replacements: list[tuple[int, int, str]] = []
    for marker in markers:
        resolution = resolutions.get(marker.text)
        if isinstance(resolution, Resolved):
            replacement = render_link(marker.label, link_prefix, resolution.anchor)
        else:
            replacement = unresolved_template.replace("{marker}", marker.text)
        replacements.extend((start, end, replacement) for start, end in marker.spans)

    if not replacements:
        return text

    parts: list[str] = []
    cursor = 0
    for start, end, replacement in sorted(replacements):
        parts.append(text[cursor:start])
        parts.append(replacement)
        cursor = end
    parts.append(text[cursor:])
    return "".join(parts)


__all__ = ["render_link", "rewrite_document"]
