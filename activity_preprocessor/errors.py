"""Errors raised while decoding activity metadata."""

from __future__ import annotations


class DecodeError(ValueError):
    """Base class for failures that abort decoding of a structure."""


class MalformedStructureError(DecodeError):
    """The document has an unexpected structure, token or field value."""


class NumericRangeError(DecodeError):
    """A numeric field does not fit the width of its target integer."""

    def __init__(self, field: str, value: str, bits: int) -> None:
        super().__init__(
            f"{field} value {value!r} does not fit an unsigned {bits}-bit integer"
        )
        self.field = field
        self.value = value
        self.bits = bits
