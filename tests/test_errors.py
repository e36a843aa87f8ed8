import pytest

from clucu.errors import (
    ClucuError,
    NotComputedError,
    ParameterError,
    RootFindingError,
    SplineError,
    UnphysicalNeutrinoMassError,
)


def test_str_has_code_and_message():
    err = ClucuError("wrong in neutrino", 1)
    assert str(err) == "WARNING 1: wrong in neutrino"


def test_attributes_are_kept():
    err = SplineError("bad spline", 42)
    assert err.code == 42
    assert err.message == "bad spline"


def test_long_message_is_truncated():
    err = ClucuError("x" * 400, 7)
    text = str(err)
    assert text.startswith("WARNING 7: ")
    assert len(text) == len("WARNING 7: ") + 249


def test_default_code_used_when_missing():
    err = ParameterError("unknown preset")
    assert err.code == ParameterError.default_code


@pytest.mark.parametrize(
    "cls",
    [SplineError, RootFindingError, UnphysicalNeutrinoMassError, NotComputedError, ParameterError],
)
def test_subclasses_caught_as_base(cls):
    err = cls("boom", 3)
    assert str(err) == "WARNING 3: boom"
    assert err.code == 3
    assert err.message == "boom"
    with pytest.raises(ClucuError) as info:
        raise err
    assert str(info.value) == "WARNING 3: boom"