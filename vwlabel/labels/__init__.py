"""Registry of pluggable label types."""

from typing import Dict

from .base import LabelParser
from .simple import SimpleLabelParser, simple_label

LABEL_PARSERS: Dict[str, LabelParser] = {
    simple_label.name: simple_label,
}


def get_label_parser(kind: str) -> LabelParser:
    """Return the parser registered for ``kind``; resolve once per dataset."""

    try:
        return LABEL_PARSERS[kind]
    except KeyError:
        known = ", ".join(sorted(LABEL_PARSERS))
        raise KeyError(f"unknown label kind {kind!r}; known kinds: {known}") from None


__all__ = ["LABEL_PARSERS", "LabelParser", "SimpleLabelParser", "get_label_parser", "simple_label"]
