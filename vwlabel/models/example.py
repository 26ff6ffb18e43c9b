"""Training example container and its reuse pool."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional

from .label import LabelRecord

if TYPE_CHECKING:
    from vwlabel.labels.base import LabelParser


@dataclass(slots=True)
class Example:
    """Single example; owns its label record by value."""

    label: LabelRecord = field(default_factory=LabelRecord)
    tag: Optional[str] = None
    feature_text: str = ""
    num_features: int = 0
    partial_prediction: float = 0.0
    final_prediction: float = 0.0
    loss: float = 0.0
    revert_weight: float = 0.0
    example_counter: int = 0
    in_use: bool = False

    def reset(self) -> None:
        self.tag = None
        self.feature_text = ""
        self.num_features = 0
        self.partial_prediction = 0.0
        self.final_prediction = 0.0
        self.loss = 0.0
        self.revert_weight = 0.0


class ExamplePool:
    """Hands out reusable examples whose labels are reset by the active parser."""

    def __init__(self, label_parser: "LabelParser", size: int = 256) -> None:
        if size <= 0:
            raise ValueError("pool size must be positive")
        self._parser = label_parser
        self._free: List[Example] = [self._allocate() for _ in range(size)]
        self._issued = 0

    def _allocate(self) -> Example:
        return Example(label=self._parser.new_record())

    def get(self) -> Example:
        ec = self._free.pop() if self._free else self._allocate()
        self._parser.default(ec.label)
        ec.reset()
        self._issued += 1
        ec.example_counter = self._issued
        ec.in_use = True
        return ec

    def release(self, ec: Example) -> None:
        if not ec.in_use:
            raise ValueError("example returned to the pool twice")
        self._parser.delete(ec.label)
        ec.reset()
        ec.in_use = False
        self._free.append(ec)

    @property
    def available(self) -> int:
        return len(self._free)
