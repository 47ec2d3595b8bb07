"""User-facing interfaces for citelink."""
