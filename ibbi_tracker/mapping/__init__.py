"""Keyword-based schema mapping for drifting column headers."""

from .schema_mapper import (
    ANNOUNCEMENT_RULES,
    ASSIGNMENT_RULES,
    PUBLIC_ANNOUNCEMENT_RULES,
    RULES_BY_KIND,
    ColumnResolution,
    FieldRule,
    SchemaMapper,
    normalize_header,
    resolve_columns,
)

__all__ = [
    "SchemaMapper",
    "FieldRule",
    "ColumnResolution",
    "resolve_columns",
    "normalize_header",
    "ASSIGNMENT_RULES",
    "ANNOUNCEMENT_RULES",
    "PUBLIC_ANNOUNCEMENT_RULES",
    "RULES_BY_KIND",
]
