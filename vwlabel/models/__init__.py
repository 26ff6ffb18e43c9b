"""Shared dataclasses for labels, examples and session statistics."""

from .example import Example, ExamplePool
from .label import (
    UNKNOWN_LABEL,
    LabelRecord,
    as_float32,
    float32_bits,
    is_nan_bits,
    is_unknown_label,
    nanpattern,
)
from .shared import SharedData

__all__ = [
    "Example",
    "ExamplePool",
    "UNKNOWN_LABEL",
    "LabelRecord",
    "SharedData",
    "as_float32",
    "float32_bits",
    "is_nan_bits",
    "is_unknown_label",
    "nanpattern",
]
