from pathlib import Path

import pytest

from vwlabel.config import ParserSettings, ReportingSettings, Settings
from vwlabel.errors import FormatError
from vwlabel.pipeline import LabelingPipeline, LabelSession

DATA = """1 'first| a b c
-1 2.0 'second| d
0.5 1 0.25 'third| e f
| g
"""


def quiet_session(**parser) -> LabelSession:
    return LabelSession(
        Settings(reporting=ReportingSettings(quiet=True), parser=ParserSettings(**parser))
    )


def write_data(tmp_path: Path, text: str = DATA) -> Path:
    path = tmp_path / "train.txt"
    path.write_text(text, encoding="utf-8")
    return path


def test_single_text_pass_without_cache(tmp_path: Path) -> None:
    result = LabelingPipeline(quiet_session()).run(write_data(tmp_path))

    assert [row.tag for row in result.labels] == ["first", "second", "third", None]
    assert result.labels[1].weight == 2.0
    assert result.labels[2].initial == 0.25
    assert result.passes_from_cache == 0
    assert result.examples_seen == 4


def test_later_passes_read_from_cache(tmp_path: Path) -> None:
    data_path = write_data(tmp_path)
    cache_path = tmp_path / "train.txt.cache"
    session = quiet_session()

    result = LabelingPipeline(session).run(data_path, cache_path, passes=3)

    assert cache_path.exists()
    assert result.passes_from_cache == 2
    assert result.examples_seen == 12
    assert session.shared.example_number == 12
    assert [row.label for row in result.labels[:3]] == [1.0, -1.0, 0.5]


def test_existing_cache_is_reused(tmp_path: Path) -> None:
    data_path = write_data(tmp_path)
    cache_path = tmp_path / "train.txt.cache"
    LabelingPipeline(quiet_session()).run(data_path, cache_path)

    result = LabelingPipeline(quiet_session()).run(data_path, cache_path, passes=1)

    assert result.passes_from_cache == 1
    assert result.fallbacks == 0


def test_corrupted_cache_falls_back_to_text(tmp_path: Path) -> None:
    data_path = write_data(tmp_path)
    cache_path = tmp_path / "train.txt.cache"
    LabelingPipeline(quiet_session()).run(data_path, cache_path)
    cache_path.write_bytes(cache_path.read_bytes()[:-6])

    session = quiet_session()
    result = LabelingPipeline(session).run(data_path, cache_path, passes=2)

    assert result.fallbacks == 1
    assert result.examples_seen == 8
    assert session.shared.example_number == 8
    assert session.shared.weighted_examples == 10.0
    assert session.shared.total_features == 2 * 7
    assert result.errors
    assert result.passes_from_cache == 1
    assert [row.tag for row in result.labels] == ["first", "second", "third", None]


def test_garbage_cache_is_replaced(tmp_path: Path) -> None:
    data_path = write_data(tmp_path)
    cache_path = tmp_path / "train.txt.cache"
    cache_path.write_bytes(b"garbage")

    result = LabelingPipeline(quiet_session()).run(data_path, cache_path)

    assert result.passes_from_cache == 0
    assert cache_path.read_bytes().startswith(b"VWLC")


def test_malformed_line_aborts_and_removes_partial_cache(tmp_path: Path) -> None:
    data_path = write_data(tmp_path, "1 | a\n1 2 3 4 | b\n")
    cache_path = tmp_path / "train.txt.cache"

    with pytest.raises(FormatError):
        LabelingPipeline(quiet_session()).run(data_path, cache_path)

    assert not cache_path.exists()
    assert list(tmp_path.glob("*.partial")) == []


def test_malformed_line_skipped_when_configured(tmp_path: Path) -> None:
    data_path = write_data(tmp_path, "1 | a\nbad | b\n0 | c\n")

    result = LabelingPipeline(quiet_session(skip_malformed=True)).run(data_path)

    assert result.skipped_lines == [2]
    assert [row.label for row in result.labels] == [1.0, 0.0]


def test_passes_must_be_positive(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        LabelingPipeline(quiet_session()).run(write_data(tmp_path), passes=0)
