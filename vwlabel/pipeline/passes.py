"""Multi-pass example reading: text on the first pass, cache afterwards."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Iterable, List, Optional

from vwlabel.adapters.text_lines import TextExampleReader
from vwlabel.cache.file import CacheReader, CacheWriter
from vwlabel.errors import CacheCorruptionError
from vwlabel.labels.simple import return_simple_example
from vwlabel.models.example import Example

from .session import LabelSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LabeledRow:
    tag: Optional[str]
    label: float
    weight: float
    initial: float


@dataclass
class PassResult:
    labels: List[LabeledRow]
    examples_seen: int = 0
    passes_from_cache: int = 0
    fallbacks: int = 0
    skipped_lines: List[int] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


class LabelingPipeline:
    """Reads a text dataset once, then replays it from the binary cache."""

    def __init__(self, session: Optional[LabelSession] = None) -> None:
        self.session = session or LabelSession()

    def run(self, text_path: Path, cache_path: Optional[Path] = None, passes: int = 1) -> PassResult:
        if passes < 1:
            raise ValueError("passes must be at least 1")

        text_path = Path(text_path)
        cache_path = Path(cache_path) if cache_path is not None else None
        result = PassResult(labels=[])
        cache_ready = cache_path is not None and self._cache_usable(cache_path, result)

        for pass_index in range(1, passes + 1):
            if cache_ready and cache_path is not None:
                # A failed replay must not leave its examples counted.
                snapshot = replace(self.session.shared)
                seen_before = result.examples_seen
                try:
                    result.labels = self._cache_pass(cache_path, result)
                    result.passes_from_cache += 1
                    logger.debug("Pass %d replayed from cache %s", pass_index, cache_path)
                    continue
                except CacheCorruptionError as exc:
                    logger.warning("Cache %s is corrupted (%s); re-parsing %s", cache_path, exc, text_path)
                    result.errors.append(str(exc))
                    self.session.shared = snapshot
                    result.examples_seen = seen_before
                    result.fallbacks += 1
                    cache_path.unlink(missing_ok=True)
                    cache_ready = False

            result.labels = self._text_pass(text_path, cache_path, result)
            cache_ready = cache_path is not None
            logger.debug("Pass %d parsed from text %s", pass_index, text_path)

        return result

    def _cache_usable(self, cache_path: Path, result: PassResult) -> bool:
        if not cache_path.exists():
            return False
        try:
            CacheReader.open(self.session, cache_path).close()
        except CacheCorruptionError as exc:
            logger.warning("Ignoring unusable cache %s: %s", cache_path, exc)
            result.errors.append(str(exc))
            cache_path.unlink(missing_ok=True)
            return False
        return True

    def _text_pass(self, text_path: Path, cache_path: Optional[Path], result: PassResult) -> List[LabeledRow]:
        reader = TextExampleReader(self.session)
        if cache_path is None:
            rows = self._consume(reader.read_path(text_path), result)
        else:
            partial = cache_path.with_name(cache_path.name + ".partial")
            try:
                with CacheWriter.create(self.session, partial) as writer:
                    rows = self._consume(reader.read_path(text_path), result, writer)
            except BaseException:
                partial.unlink(missing_ok=True)
                raise
            partial.replace(cache_path)
        result.skipped_lines = list(reader.skipped)
        return rows

    def _cache_pass(self, cache_path: Path, result: PassResult) -> List[LabeledRow]:
        with CacheReader.open(self.session, cache_path) as reader:
            return self._consume(reader, result)

    def _consume(
        self,
        examples: Iterable[Example],
        result: PassResult,
        writer: Optional[CacheWriter] = None,
    ) -> List[LabeledRow]:
        parser = self.session.label_parser
        rows: List[LabeledRow] = []
        for ec in examples:
            if writer is not None:
                writer.write(ec)
            rows.append(
                LabeledRow(
                    tag=ec.tag,
                    label=ec.label.label,
                    weight=parser.get_weight(ec.label),
                    initial=parser.get_initial(ec.label),
                )
            )
            result.examples_seen += 1
            return_simple_example(self.session, ec)
        return rows
