"""Pipeline entry points."""

from .passes import LabeledRow, LabelingPipeline, PassResult
from .session import LabelSession

__all__ = ["LabeledRow", "LabelingPipeline", "LabelSession", "PassResult"]
