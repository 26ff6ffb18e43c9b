"""Simple (scalar) label: text parse, binary cache codec, defaults and accessors.

A simple label is written on an input line as up to three numbers::

    <label> [<weight> [<initial>]]

The cache record stores a one-byte presence marker followed by binary32
values. The weight and the initial prediction are written only when they
differ from their defaults (1.0 and 0.0), so the common case costs five
bytes per example.
"""

from __future__ import annotations

import logging
import math
import re
import struct
import warnings
from typing import TYPE_CHECKING, Sequence

from vwlabel.errors import CacheCorruptionError, FormatError, SemanticWarning
from vwlabel.io import IOBuf
from vwlabel.models.example import Example
from vwlabel.models.label import (
    UNKNOWN_LABEL,
    LabelRecord,
    as_float32,
    is_unknown_label,
)
from vwlabel.models.shared import SharedData

from .base import Token

if TYPE_CHECKING:
    from vwlabel.pipeline.session import LabelSession

logger = logging.getLogger(__name__)

MAX_LABEL_TOKENS = 3
WEIGHT_PRESENT = 0x01
INITIAL_PRESENT = 0x02
KNOWN_FLAGS = WEIGHT_PRESENT | INITIAL_PRESENT

MARKER_STRUCT = struct.Struct("<B")
VALUE_STRUCT = struct.Struct("<f")
LABEL_SIZE = 3 * VALUE_STRUCT.size

_FLOAT_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_NAN_RE = re.compile(r"[+-]?nan", re.IGNORECASE)
# Smallest magnitude that rounds to infinity in binary32.
_FLOAT32_OVERFLOW = 2.0**128 - 2.0**103


def float_of_token(token: Token) -> float:
    """Strictly parse one label token into a binary32 value.

    The whole token must be a decimal number or ``nan``; infinities and values
    that overflow binary32 are rejected.
    """

    if isinstance(token, (bytes, bytearray)):
        try:
            text = bytes(token).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise FormatError(f"label token is not valid UTF-8: {token!r}", tokens=[repr(token)]) from exc
    else:
        text = str(token)

    if _NAN_RE.fullmatch(text):
        return UNKNOWN_LABEL
    if not _FLOAT_RE.fullmatch(text):
        raise FormatError(f"label token is not a number: {text!r}", tokens=[text])

    value = float(text)
    if math.isinf(value) or abs(value) >= _FLOAT32_OVERFLOW:
        raise FormatError(f"label token overflows a 32-bit float: {text!r}", tokens=[text])
    return as_float32(value)


def default_simple_label(record: LabelRecord) -> None:
    record.label = UNKNOWN_LABEL
    record.weight = 1.0
    record.initial = 0.0


def parse_simple_label(shared: SharedData, record: LabelRecord, tokens: Sequence[Token]) -> None:
    """Populate ``record`` from up to three label tokens.

    Raises FormatError for more than three tokens or a token that is not a
    finite number or ``nan``. The record is only modified when every token
    parses. Non-positive weights are accepted but reported as SemanticWarning.
    """

    count = len(tokens)
    if count > MAX_LABEL_TOKENS:
        shown = [token.decode("utf-8", "replace") if isinstance(token, bytes) else str(token) for token in tokens]
        raise FormatError(
            f"malformed label: expected at most {MAX_LABEL_TOKENS} tokens, got {count}",
            tokens=shown,
        )

    values = [float_of_token(token) for token in tokens]
    default_simple_label(record)
    if count >= 1:
        record.label = values[0]
    if count >= 2:
        record.weight = values[1]
    if count >= 3:
        record.initial = values[2]

    if count >= 2 and not record.weight > 0:
        shared.non_positive_weights += 1
        warnings.warn(
            f"non-positive example weight {record.weight} accepted",
            SemanticWarning,
            stacklevel=2,
        )
    if not is_unknown_label(record.label):
        shared.count_label(record.label)


def cache_simple_label(record: LabelRecord, cache: IOBuf) -> int:
    """Write ``record`` in compact form and return the number of bytes written."""

    marker = 0
    payload = [VALUE_STRUCT.pack(record.label)]
    if record.weight != 1.0:
        marker |= WEIGHT_PRESENT
        payload.append(VALUE_STRUCT.pack(record.weight))
    if record.initial != 0.0:
        marker |= INITIAL_PRESENT
        payload.append(VALUE_STRUCT.pack(record.initial))
    return cache.write(MARKER_STRUCT.pack(marker) + b"".join(payload))


def cached_record_size(marker: int) -> int:
    """Total encoded size (marker included) declared by ``marker``."""

    optional = bin(marker & KNOWN_FLAGS).count("1")
    return MARKER_STRUCT.size + VALUE_STRUCT.size * (1 + optional)


def read_cached_simple_label(shared: SharedData, record: LabelRecord, cache: IOBuf) -> int:
    """Read one compact record into ``record``.

    Returns the number of bytes consumed, or 0 when the stream ends before a
    record starts. A truncated record or an unknown marker raises
    CacheCorruptionError and leaves ``record`` untouched.
    """

    head = cache.read(MARKER_STRUCT.size)
    if not head:
        return 0
    (marker,) = MARKER_STRUCT.unpack(head)
    if marker & ~KNOWN_FLAGS:
        raise CacheCorruptionError(f"unknown label marker 0x{marker:02x} in cache")

    total = cached_record_size(marker)
    body = cache.read(total - MARKER_STRUCT.size)
    if len(body) < total - MARKER_STRUCT.size:
        raise CacheCorruptionError(
            f"truncated label record: marker declares {total} bytes, "
            f"only {len(body) + MARKER_STRUCT.size} available",
            expected=total,
            available=len(body) + MARKER_STRUCT.size,
        )

    values = iter(struct.unpack(f"<{len(body) // VALUE_STRUCT.size}f", body))
    record.label = float(next(values))
    record.weight = float(next(values)) if marker & WEIGHT_PRESENT else 1.0
    record.initial = float(next(values)) if marker & INITIAL_PRESENT else 0.0

    if not is_unknown_label(record.label):
        shared.count_label(record.label)
    return total


def delete_simple_label(record: LabelRecord) -> None:
    # Nothing to release; the record owns no resources.
    return None


def get_weight(record: LabelRecord) -> float:
    return record.weight


def get_initial(record: LabelRecord) -> float:
    return record.initial


class SimpleLabelParser:
    """Label parser bundle for scalar labels."""

    name = "simple"
    label_size = LABEL_SIZE

    def new_record(self) -> LabelRecord:
        return LabelRecord()

    def default(self, record: LabelRecord) -> None:
        default_simple_label(record)

    def parse(self, shared: SharedData, record: LabelRecord, tokens: Sequence[Token]) -> None:
        parse_simple_label(shared, record, tokens)

    def cache_write(self, record: LabelRecord, cache: IOBuf) -> int:
        return cache_simple_label(record, cache)

    def cache_read(self, shared: SharedData, record: LabelRecord, cache: IOBuf) -> int:
        return read_cached_simple_label(shared, record, cache)

    def delete(self, record: LabelRecord) -> None:
        delete_simple_label(record)

    def get_weight(self, record: LabelRecord) -> float:
        return get_weight(record)

    def get_initial(self, record: LabelRecord) -> float:
        return get_initial(record)


simple_label = SimpleLabelParser()


def return_simple_example(session: "LabelSession", ec: Example) -> None:
    """Account a finished example in the session statistics and recycle it."""

    shared = session.shared
    ld = ec.label

    shared.weighted_examples += ld.weight
    if is_unknown_label(ld.label):
        shared.weighted_unlabeled_examples += ld.weight
    else:
        shared.weighted_labels += ld.label * ld.weight
    shared.sum_loss += ec.loss
    shared.sum_loss_since_last_dump += ec.loss
    shared.total_features += ec.num_features
    shared.example_number += 1

    reporting = session.settings.reporting
    if shared.weighted_examples >= shared.dump_interval and not reporting.quiet:
        _print_update(shared, ec)
        if reporting.progress_add:
            shared.dump_interval += reporting.progress_interval
        else:
            shared.dump_interval *= reporting.progress_interval

    session.pool.release(ec)


def _print_update(shared: SharedData, ec: Example) -> None:
    ld = ec.label
    label_text = "unknown" if is_unknown_label(ld.label) else f"{ld.label:.4f}"
    logger.info(
        "avg_loss=%.6f since_last=%.6f example=%d weighted=%.1f label=%s predict=%.4f features=%d",
        shared.average_loss(),
        shared.loss_since_last_dump(),
        shared.example_number,
        shared.weighted_examples,
        label_text,
        ec.final_prediction,
        ec.num_features,
    )
    shared.sum_loss_since_last_dump = 0.0
    shared.old_weighted_examples = shared.weighted_examples


def active_coin_bias(k: float, avg_loss: float, g: float, c0: float) -> float:
    """Query probability for importance-weighted active learning."""

    b = c0 * (math.log(k + 1.0) + 0.0001) / (k + 0.0001)
    sb = math.sqrt(b)
    avg_loss = min(1.0, max(0.0, avg_loss))
    sl = sb + avg_loss
    if g <= b:
        return 1.0
    rs = (sl + math.sqrt(sl * sl + 4.0 * g)) / (2.0 * g)
    return b * rs * rs


def query_decision(session: "LabelSession", ec: Example, k: float) -> float:
    """Decide whether to request the label of ``ec``.

    Returns the importance weight ``1 / bias`` when the label is queried and
    ``-1.0`` otherwise.
    """

    if k <= 1.0:
        bias = 1.0
    else:
        shared = session.shared
        active = session.settings.active
        weighted_queries = active.initial_t + shared.weighted_examples
        avg_loss = shared.sum_loss / k + math.sqrt((1.0 + 0.5 * math.log(k)) / (weighted_queries + 0.0001))
        bias = active_coin_bias(k, avg_loss, ec.revert_weight / k, active.c0)

    if session.rng.random() < bias:
        return 1.0 / bias
    return -1.0
