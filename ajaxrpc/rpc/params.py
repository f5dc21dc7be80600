"""Decode positional JSON parameters into the values a method expects."""

from __future__ import annotations

import json
import math
from typing import Any, Sequence

from pydantic import ValidationError

from ajaxrpc.rpc.shapes import TypeShape
from ajaxrpc.utils.exceptions import ParameterError


def decode_params(raw_params: Sequence[Any], shapes: Sequence[TypeShape]) -> list[Any]:
    """
    Match ``raw_params`` against ``shapes`` position by position.

    Raises ParameterError on arity mismatch or on the first value that does not
    fit its shape (1-based position in the message).
    """
    if len(raw_params) != len(shapes):
        raise ParameterError.arity()

    args: list[Any] = []
    for position, (raw, shape) in enumerate(zip(raw_params, shapes), start=1):
        if shape.is_struct:
            args.append(_decode_struct(raw, shape, position))
        else:
            args.append(_decode_scalar(raw, shape.annotation, position))
    return args


def _decode_struct(raw: Any, shape: TypeShape, position: int) -> Any:
    # Strict JSON-mode validation: objects map to fields, field types must match exactly.
    try:
        return shape.adapter.validate_json(json.dumps(raw), strict=True)
    except (ValidationError, TypeError, ValueError):
        raise ParameterError.type_mismatch(position) from None


def _decode_scalar(raw: Any, target: type, position: int) -> Any:
    actual = type(raw)
    if actual is target:
        return raw
    if target is float and actual is int:
        # JSON has one number type; integral literals are valid floats.
        try:
            return float(raw)
        except OverflowError:
            raise ParameterError.type_mismatch(position) from None
    if target is int and actual is float:
        return coerce_float_to_int(raw, position)
    raise ParameterError.type_mismatch(position)


def coerce_float_to_int(value: float, position: int) -> int:
    """Accept a float for an int parameter only when it is finite and integral."""
    if not math.isfinite(value) or not value.is_integer():
        raise ParameterError.type_mismatch(position)
    return int(value)
