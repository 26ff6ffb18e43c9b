"""Adapter splitting text example lines into label tokens, tag and features."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Iterator, List, Optional

from vwlabel.errors import FormatError
from vwlabel.models.example import Example

if TYPE_CHECKING:
    from vwlabel.pipeline.session import LabelSession

logger = logging.getLogger(__name__)

NAMESPACE_SEPARATOR = "|"
TAG_PREFIX = "'"


@dataclass(frozen=True)
class SplitLine:
    """Result of splitting one input line."""

    label_tokens: List[str]
    tag: Optional[str]
    feature_text: str
    num_features: int


def split_line(line: str) -> SplitLine:
    """Split ``label [tag]|features`` into its parts.

    The tag is either a token starting with ``'`` or the last label token when
    it is written flush against the first ``|``.
    """

    line = line.rstrip("\r\n")
    label_section, sep, feature_text = line.partition(NAMESPACE_SEPARATOR)
    tokens = label_section.split()

    tag: Optional[str] = None
    if tokens:
        last = tokens[-1]
        flush = bool(sep) and bool(label_section) and not label_section[-1].isspace()
        if last.startswith(TAG_PREFIX):
            tag = last[len(TAG_PREFIX):]
            tokens = tokens[:-1]
        elif flush:
            tag = last
            tokens = tokens[:-1]

    return SplitLine(
        label_tokens=tokens,
        tag=tag,
        feature_text=feature_text if sep else "",
        num_features=count_features(feature_text) if sep else 0,
    )


def count_features(feature_text: str) -> int:
    count = 0
    for segment in feature_text.split(NAMESPACE_SEPARATOR):
        words = segment.split()
        if words and segment and not segment[0].isspace():
            # Leading word glued to '|' names the namespace.
            words = words[1:]
        count += len(words)
    return count


class TextExampleReader:
    """Turns text lines into pooled examples with parsed labels."""

    def __init__(self, session: "LabelSession") -> None:
        self.session = session
        self.skipped: List[int] = []

    def read_lines(self, lines: Iterable[str]) -> Iterator[Example]:
        parser = self.session.label_parser
        for line_number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            split = split_line(line)
            ec = self.session.pool.get()
            try:
                parser.parse(self.session.shared, ec.label, split.label_tokens)
            except FormatError as exc:
                self.session.pool.release(ec)
                if not self.session.settings.parser.skip_malformed:
                    raise FormatError(str(exc), tokens=exc.tokens, line_number=line_number) from exc
                logger.warning("Skipping malformed line %d: %s", line_number, exc)
                self.skipped.append(line_number)
                continue

            ec.tag = split.tag
            ec.feature_text = split.feature_text
            ec.num_features = split.num_features
            yield ec

    def read_path(self, path: Path) -> Iterator[Example]:
        with Path(path).open("r", encoding="utf-8") as handle:
            yield from self.read_lines(handle)
