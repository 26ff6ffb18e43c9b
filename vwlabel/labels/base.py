"""Interface every pluggable label type implements."""

from __future__ import annotations

from typing import Protocol, Sequence, Union

from vwlabel.io import IOBuf
from vwlabel.models.label import LabelRecord
from vwlabel.models.shared import SharedData

Token = Union[str, bytes]


class LabelParser(Protocol):
    """Operations the example reader invokes regardless of the active label type."""

    name: str
    label_size: int

    def new_record(self) -> LabelRecord:
        ...

    def default(self, record: LabelRecord) -> None:
        ...

    def parse(self, shared: SharedData, record: LabelRecord, tokens: Sequence[Token]) -> None:
        ...

    def cache_write(self, record: LabelRecord, cache: IOBuf) -> int:
        ...

    def cache_read(self, shared: SharedData, record: LabelRecord, cache: IOBuf) -> int:
        ...

    def delete(self, record: LabelRecord) -> None:
        ...

    def get_weight(self, record: LabelRecord) -> float:
        ...

    def get_initial(self, record: LabelRecord) -> float:
        ...
