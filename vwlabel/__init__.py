"""Label codec for a streaming online learner."""

from .errors import CacheCorruptionError, FormatError, SemanticWarning, VWLabelError
from .labels import get_label_parser, simple_label
from .models import LabelRecord, nanpattern

__all__ = [
    "CacheCorruptionError",
    "FormatError",
    "SemanticWarning",
    "VWLabelError",
    "LabelRecord",
    "get_label_parser",
    "nanpattern",
    "simple_label",
]
