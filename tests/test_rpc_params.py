"""Tests for positional parameter decoding."""

from __future__ import annotations

import math

import pytest

from ajaxrpc.rpc.params import coerce_float_to_int, decode_params
from ajaxrpc.rpc.shapes import shape_of
from ajaxrpc.utils.exceptions import ParameterError

from conftest import A, Point


def _shapes(*annotations):
    return [shape_of(annotation) for annotation in annotations]


def test_exact_scalars_pass_through():
    raw = [True, 3, 1.5, "s", [1, "a"], {"k": None}]
    assert decode_params(raw, _shapes(bool, int, float, str, list, dict)) == raw


def test_int_widens_to_float():
    (value,) = decode_params([2], _shapes(float))
    assert value == 2.0
    assert isinstance(value, float)


@pytest.mark.parametrize("raw", [True, "1", None, [1], {"a": 1}])
def test_scalar_mismatch(raw):
    with pytest.raises(ParameterError) as exc:
        decode_params([raw], _shapes(int))
    assert exc.value.position == 1


def test_first_mismatch_position_is_reported():
    with pytest.raises(ParameterError) as exc:
        decode_params([1, "x", "y"], _shapes(int, int, int))
    assert exc.value.message == "Type mismatch parameter 2."


@pytest.mark.parametrize(("raw", "shapes"), [([], (int,)), ([1, 2], (int,)), ([1], ())])
def test_arity_checked_before_types(raw, shapes):
    with pytest.raises(ParameterError) as exc:
        decode_params(raw, _shapes(*shapes))
    assert exc.value.message == "Incorrect number of parameters."


def test_no_params():
    assert decode_params([], []) == []


class TestStructs:
    def test_model(self):
        (value,) = decode_params([{"x": "a", "y": 2}], _shapes(A))
        assert value == A(x="a", y=2)

    def test_dataclass(self):
        (value,) = decode_params([{"x": 1, "y": 2}], _shapes(Point))
        assert value == Point(x=1, y=2)

    def test_extra_fields_ignored(self):
        (value,) = decode_params([{"x": "a", "y": 2, "z": True}], _shapes(A))
        assert value == A(x="a", y=2)

    @pytest.mark.parametrize(
        "raw",
        [{"x": "a", "y": "2"}, {"x": 1, "y": 2}, {"x": "a"}, "a", 5, None, [1, 2]],
    )
    def test_mismatch(self, raw):
        with pytest.raises(ParameterError) as exc:
            decode_params([raw], _shapes(A))
        assert exc.value.message == "Type mismatch parameter 1."

    def test_generic_containers(self):
        values = decode_params([[1, 2], {"a": {"x": "s", "y": 1}}], _shapes(list[int], dict[str, A]))
        assert values == [[1, 2], {"a": A(x="s", y=1)}]

    def test_list_element_mismatch(self):
        with pytest.raises(ParameterError):
            decode_params([[1, 2.5]], _shapes(list[int]))


class TestFloatToInt:
    def test_integral(self):
        assert coerce_float_to_int(4.0, 1) == 4
        assert isinstance(coerce_float_to_int(-0.0, 1), int)

    @pytest.mark.parametrize("value", [4.5, math.inf, -math.inf, math.nan])
    def test_rejected(self, value):
        with pytest.raises(ParameterError) as exc:
            coerce_float_to_int(value, 2)
        assert exc.value.position == 2


def test_integer_too_large_for_float():
    with pytest.raises(ParameterError) as exc:
        decode_params([1, 10**400], _shapes(float, float))
    assert exc.value.message == "Type mismatch parameter 2."
