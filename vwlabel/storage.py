"""Tabular export of parsed labels."""

from __future__ import annotations

from dataclasses import asdict
from pathlib import Path
from typing import Sequence

import pandas as pd

from vwlabel.pipeline.passes import LabeledRow

LABEL_COLUMNS = ["tag", "label", "weight", "initial"]


def labels_frame(rows: Sequence[LabeledRow]) -> pd.DataFrame:
    """Build a DataFrame with one row per example; unknown labels stay NaN."""

    return pd.DataFrame([asdict(row) for row in rows], columns=LABEL_COLUMNS)


def ensure_output_dir(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def save_labels_csv(path: Path, rows: Sequence[LabeledRow]) -> Path:
    path = Path(path)
    ensure_output_dir(path)
    labels_frame(rows).to_csv(path, index=False)
    return path


__all__ = ["LABEL_COLUMNS", "labels_frame", "save_labels_csv"]
