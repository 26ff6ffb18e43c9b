"""Adapters that normalize raw inputs into examples."""

from .text_lines import SplitLine, TextExampleReader, count_features, split_line

__all__ = ["SplitLine", "TextExampleReader", "count_features", "split_line"]
