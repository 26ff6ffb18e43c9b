import math
import warnings

import pytest

from vwlabel.errors import FormatError, SemanticWarning
from vwlabel.labels.simple import (
    default_simple_label,
    float_of_token,
    get_initial,
    get_weight,
    parse_simple_label,
)
from vwlabel.models import LabelRecord, SharedData, as_float32


@pytest.fixture
def shared() -> SharedData:
    return SharedData()


def parse(shared: SharedData, tokens) -> LabelRecord:
    record = LabelRecord(label=9.0, weight=9.0, initial=9.0)
    parse_simple_label(shared, record, tokens)
    return record


def test_parse_label_only(shared: SharedData) -> None:
    record = parse(shared, ["0.5"])

    assert record.as_tuple() == (0.5, 1.0, 0.0)


def test_parse_label_and_weight(shared: SharedData) -> None:
    record = parse(shared, ["0.5", "2.0"])

    assert record.as_tuple() == (0.5, 2.0, 0.0)


def test_parse_all_three_fields(shared: SharedData) -> None:
    record = parse(shared, ["0.5", "2.0", "0.1"])

    assert record.label == 0.5
    assert record.weight == 2.0
    assert record.initial == as_float32(0.1)
    assert record.initial == pytest.approx(0.1)


def test_parse_no_tokens_applies_default(shared: SharedData) -> None:
    record = parse(shared, [])

    assert math.isnan(record.label)
    assert record.weight == 1.0
    assert record.initial == 0.0
    assert not shared.has_label_range


def test_parse_accepts_bytes_tokens(shared: SharedData) -> None:
    record = parse(shared, [b"-1", b"3"])

    assert record.as_tuple() == (-1.0, 3.0, 0.0)


def test_too_many_tokens_raise_format_error(shared: SharedData) -> None:
    record = LabelRecord(label=4.0)

    with pytest.raises(FormatError) as excinfo:
        parse_simple_label(shared, record, ["1", "1", "0", "extra"])

    assert excinfo.value.tokens == ["1", "1", "0", "extra"]
    assert "4" in str(excinfo.value)
    assert record.label == 4.0


@pytest.mark.parametrize("token", ["abc", "1.5x", "0x10", "1_000", "", "inf", "-Infinity", "1e39"])
def test_invalid_numbers_raise_format_error(shared: SharedData, token: str) -> None:
    with pytest.raises(FormatError):
        parse(shared, [token])


@pytest.mark.parametrize("token, expected", [("1", 1.0), ("-.5", -0.5), ("+2.", 2.0), ("1e-3", as_float32(1e-3))])
def test_float_of_token_accepts_decimal_forms(token: str, expected: float) -> None:
    assert float_of_token(token) == expected


def test_nan_label_is_unknown_not_an_error(shared: SharedData) -> None:
    record = parse(shared, ["NaN", "2"])

    assert math.isnan(record.label)
    assert record.weight == 2.0
    assert not shared.has_label_range


def test_parse_updates_label_range(shared: SharedData) -> None:
    parse(shared, ["-3"])
    parse(shared, ["7", "0.5"])

    assert shared.min_label == -3.0
    assert shared.max_label == 7.0


@pytest.mark.parametrize("weight", ["0", "-1.5"])
def test_non_positive_weight_is_accepted_with_warning(shared: SharedData, weight: str) -> None:
    with pytest.warns(SemanticWarning):
        record = parse(shared, ["1", weight])

    assert record.weight == float(weight)


def test_positive_weight_does_not_warn(shared: SharedData) -> None:
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        parse(shared, ["1", "0.25", "-0.5"])


def test_default_overwrites_populated_record() -> None:
    record = LabelRecord(label=1.0, weight=3.0, initial=2.0)

    default_simple_label(record)

    assert math.isnan(record.label)
    assert get_weight(record) == 1.0
    assert get_initial(record) == 0.0


def test_non_positive_weights_are_counted_even_when_warnings_are_silenced(shared: SharedData) -> None:
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        for weight in ("0", "-1", "2", "0"):
            parse(shared, ["1", weight])

    assert shared.non_positive_weights == 3
