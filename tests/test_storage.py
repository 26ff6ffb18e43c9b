import math
from pathlib import Path

import pandas as pd

from vwlabel.pipeline import LabeledRow
from vwlabel.storage import LABEL_COLUMNS, labels_frame, save_labels_csv


ROWS = [
    LabeledRow(tag="a", label=1.0, weight=2.0, initial=0.0),
    LabeledRow(tag=None, label=float("nan"), weight=1.0, initial=0.5),
]


def test_labels_frame_columns() -> None:
    df = labels_frame(ROWS)

    assert list(df.columns) == LABEL_COLUMNS
    assert len(df) == 2
    assert math.isnan(df.loc[1, "label"])


def test_labels_frame_empty() -> None:
    df = labels_frame([])

    assert df.empty
    assert list(df.columns) == LABEL_COLUMNS


def test_save_labels_csv(tmp_path: Path) -> None:
    path = save_labels_csv(tmp_path / "out" / "labels.csv", ROWS)

    restored = pd.read_csv(path)

    assert restored["weight"].tolist() == [2.0, 1.0]
    assert restored["tag"].isna().tolist() == [False, True]
