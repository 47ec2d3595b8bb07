"""Configuration model for citation processing.

CitationConfig

`style` (`str`)
: Name of the pybtex formatting style used to render bibliography entries
  (`plain`, `unsrt`, `alpha`, `unsrtalpha`).

`backend` (`str`)
: pybtex output backend the formatted entries are rendered through
  (`markdown`, `text`, `html`, `latex`).

`link_prefix` (`str`)
: Path or URL fragment prepended to the `#anchor` part of every citation
  link. Empty links point at anchors within the same document.

`bibliography_title` (`str`)
: Text of the top-level bibliography heading.

`fuzzy_matching` (`bool`)
: Fall back to approximate surname matching when no record carries the exact
  surname and year of a marker.

`fuzzy_max_distance` (`int`)
: Maximum Levenshtein distance accepted by the approximate surname matcher.
  Candidates must also stay within one edit per three characters of the
  typed surname.

`unresolved_template` (`str`)
: Replacement written in place of markers that could not be resolved.
  `{marker}` expands to the literal marker text.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
import yaml

from .exceptions import ConfigurationError


DEFAULT_UNRESOLVED_TEMPLATE = "{marker} [Reference Not Found]"


class CitationConfig(BaseModel):
    """Settings shared by the pipeline and the command line."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    style: str = Field(default="plain", description="pybtex formatting style")
    backend: str = Field(default="markdown", description="pybtex output backend")
    link_prefix: str = ""
    bibliography_title: str = "Bibliography"
    fuzzy_matching: bool = True
    fuzzy_max_distance: int = Field(default=2, ge=0)
    unresolved_template: str = DEFAULT_UNRESOLVED_TEMPLATE

    @field_validator("unresolved_template")
    @classmethod
    def _require_marker_placeholder(cls, value: str) -> str:
        if "{marker}" not in value:
            raise ValueError("unresolved_template must contain '{marker}'")
        return value

    def merged(self, **overrides: Any) -> CitationConfig:
        """Return a copy with the non-``None`` overrides applied."""
        payload = {key: value for key, value in overrides.items() if value is not None}
        if not payload:
            return self
        try:
            return self.model_validate({**self.model_dump(), **payload})
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid configuration override: {exc}") from exc


def load_config(path: Path | str) -> CitationConfig:
    """Read a YAML configuration file into a :class:`CitationConfig`."""
    config_path = Path(path)
    try:
        raw_text = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Unable to read configuration '{config_path}': {exc}") from exc

    try:
        payload = yaml.safe_load(raw_text) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in '{config_path}': {exc}") from exc

    if not isinstance(payload, dict):
        raise ConfigurationError(f"Configuration '{config_path}' must contain a mapping.")

    # Allow the settings to live under a `citelink` section of a larger file.
    section = payload.get("citelink", payload)
    if not isinstance(section, dict):
        raise ConfigurationError(f"The 'citelink' section of '{config_path}' must be a mapping.")

    try:
        return CitationConfig.model_validate(section)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration in '{config_path}': {exc}") from exc


__all__ = ["DEFAULT_UNRESOLVED_TEMPLATE", "CitationConfig", "load_config"]
