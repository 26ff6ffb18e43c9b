"""Per-session statistics shared by every example of a dataset."""

from __future__ import annotations

import math
import warnings
from dataclasses import dataclass
from typing import Optional

from vwlabel.errors import SemanticWarning


@dataclass
class SharedData:
    """Running label-range bookkeeping and progress accounting.

    One instance belongs to one session. It is not thread safe; callers that
    share it across reader threads must serialize access themselves.
    """

    min_label: float = math.inf
    max_label: float = -math.inf
    first_observed_label: Optional[float] = None
    second_observed_label: Optional[float] = None
    is_more_than_two_labels_observed: bool = False
    label_lower_bound: Optional[float] = None
    label_upper_bound: Optional[float] = None
    out_of_range_labels: int = 0
    non_positive_weights: int = 0

    example_number: int = 0
    weighted_examples: float = 0.0
    weighted_labels: float = 0.0
    weighted_unlabeled_examples: float = 0.0
    sum_loss: float = 0.0
    sum_loss_since_last_dump: float = 0.0
    total_features: int = 0
    dump_interval: float = 1.0
    old_weighted_examples: float = 0.0

    def count_label(self, label: float) -> None:
        """Record a known label value seen by a parser."""

        if label < self.min_label:
            self.min_label = label
        if label > self.max_label:
            self.max_label = label
        self._track_distinct(label)

        if self.label_lower_bound is not None and label < self.label_lower_bound:
            self.out_of_range_labels += 1
            warnings.warn(
                f"label {label} is below the declared lower bound {self.label_lower_bound}",
                SemanticWarning,
                stacklevel=3,
            )
        if self.label_upper_bound is not None and label > self.label_upper_bound:
            self.out_of_range_labels += 1
            warnings.warn(
                f"label {label} is above the declared upper bound {self.label_upper_bound}",
                SemanticWarning,
                stacklevel=3,
            )

    def _track_distinct(self, label: float) -> None:
        if self.is_more_than_two_labels_observed:
            return
        if self.first_observed_label is None:
            self.first_observed_label = label
        elif label == self.first_observed_label:
            return
        elif self.second_observed_label is None:
            self.second_observed_label = label
        elif label != self.second_observed_label:
            self.is_more_than_two_labels_observed = True

    @property
    def has_label_range(self) -> bool:
        return self.min_label <= self.max_label

    @property
    def weighted_labeled_examples(self) -> float:
        return self.weighted_examples - self.weighted_unlabeled_examples

    def average_loss(self) -> float:
        if self.weighted_labeled_examples <= 0:
            return 0.0
        return self.sum_loss / self.weighted_labeled_examples

    def loss_since_last_dump(self) -> float:
        delta = self.weighted_examples - self.old_weighted_examples
        if delta <= 0:
            return 0.0
        return self.sum_loss_since_last_dump / delta
