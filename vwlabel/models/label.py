"""Dataclass describing the supervision signal of a single example."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple, Union

import numpy as np

FloatLike = Union[float, np.floating]

SIGN_MASK = 0x7FFFFFFF
INFINITY_BITS = 0x7F800000
UNKNOWN_LABEL = float("nan")


def as_float32(value: FloatLike) -> float:
    """Round ``value`` to the nearest binary32 and return it as a Python float.

    Magnitudes beyond the binary32 range become infinities.
    """

    with np.errstate(over="ignore"):
        return float(np.float32(value))


def float32_bits(value: FloatLike) -> int:
    return int(np.asarray(value, dtype=np.float32).view(np.uint32))


def is_nan_bits(bits: int) -> bool:
    """Return True when a raw 32-bit pattern encodes a NaN (quiet or signalling)."""

    return (int(bits) & SIGN_MASK) > INFINITY_BITS


def nanpattern(value: FloatLike) -> bool:
    """Detect NaN from the binary32 bit pattern instead of float comparison."""

    return is_nan_bits(float32_bits(value))


def is_unknown_label(value: FloatLike) -> bool:
    return nanpattern(value)


@dataclass(slots=True)
class LabelRecord:
    """Label, importance weight and initial prediction of one example.

    Fields always hold binary32-representable values so the cache codec can
    reproduce them exactly; every assignment is rounded. The record is
    overwritten in place by the label parser; construct it through
    ``LabelParser.new_record`` or with explicit values.
    """

    label: float = field(default=UNKNOWN_LABEL)
    weight: float = 1.0
    initial: float = 0.0

    def __setattr__(self, name: str, value: FloatLike) -> None:
        object.__setattr__(self, name, as_float32(value))

    @property
    def is_labeled(self) -> bool:
        return not is_unknown_label(self.label)

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.label, self.weight, self.initial)

    def same_bits(self, other: "LabelRecord") -> bool:
        """Bitwise equality; unlike ``==`` it treats two NaN labels as equal."""

        return all(
            float32_bits(mine) == float32_bits(theirs)
            for mine, theirs in zip(self.as_tuple(), other.as_tuple())
        )
