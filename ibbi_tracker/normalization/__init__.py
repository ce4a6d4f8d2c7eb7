"""Normalization of raw rows into canonical records."""

from .service import RecordNormalizer, apply_field_defaults, make_record_id

__all__ = ["RecordNormalizer", "make_record_id", "apply_field_defaults"]
