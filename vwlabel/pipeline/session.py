"""Per-dataset session holding the label parser, statistics and example pool."""

from __future__ import annotations

from typing import Optional

import numpy as np

from vwlabel.config import Settings
from vwlabel.labels import LabelParser, get_label_parser
from vwlabel.models.example import ExamplePool
from vwlabel.models.shared import SharedData


class LabelSession:
    """Context shared by every example read from one dataset.

    The label parser is resolved once here instead of per example.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or Settings()
        self.label_parser: LabelParser = get_label_parser(self.settings.parser.label_kind)
        self.shared = SharedData(
            label_lower_bound=self.settings.labels.lower,
            label_upper_bound=self.settings.labels.upper,
        )
        self.pool = ExamplePool(self.label_parser, size=self.settings.parser.pool_size)
        self.rng = np.random.default_rng(self.settings.active.seed)
