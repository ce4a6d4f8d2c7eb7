"""Quote-aware delimited text codec."""

from .delimited import decode, decode_keyed, decode_records, encode, encode_field, encode_records

__all__ = [
    "encode",
    "encode_field",
    "encode_records",
    "decode",
    "decode_keyed",
    "decode_records",
]
