"""Discover the remotely callable methods of a receiver instance."""

from __future__ import annotations

import inspect
import typing
from typing import Any

from loguru import logger

from ajaxrpc.rpc.descriptor import MethodDescriptor
from ajaxrpc.rpc.shapes import (
    TypeShape,
    is_error_reporting_type,
    is_exported,
    shape_of,
    type_name,
    unexported_types,
)

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def discover_methods(instance: Any) -> dict[str, MethodDescriptor]:
    """
    Build descriptors for every eligible public method of ``instance``.

    A method is eligible when all its positional parameters carry a supported
    annotation and it is declared to return ``tuple[result, error]`` where the
    error type is an exception or exposes ``description()``. Ineligible methods
    are skipped with a diagnostic.
    """
    cls = type(instance)
    methods: dict[str, MethodDescriptor] = {}
    for name in sorted(dir(cls)):
        if not is_exported(name):
            continue
        static = inspect.getattr_static(cls, name, None)
        if isinstance(static, (staticmethod, property)):
            continue
        if not (inspect.isfunction(static) or isinstance(static, classmethod)):
            continue
        bound = getattr(instance, name)
        descriptor = build_descriptor(name, bound)
        if descriptor is not None:
            methods[name] = descriptor
    return methods


def build_descriptor(name: str, bound: Any) -> MethodDescriptor | None:
    """Validate one bound method; returns None when it cannot be exposed."""
    try:
        hints = typing.get_type_hints(bound)
        signature = inspect.signature(bound)
    except (NameError, TypeError, ValueError) as e:
        logger.debug("method {} has unresolvable signature: {}", name, e)
        return None

    shapes: list[TypeShape] = []
    for param in signature.parameters.values():
        if param.kind not in _POSITIONAL:
            logger.debug("method {} has non-positional parameter {}", name, param.name)
            return None
        annotation = hints.get(param.name)
        if annotation is None:
            logger.debug("method {} parameter {} is not annotated", name, param.name)
            return None
        hidden = unexported_types(annotation)
        if hidden:
            logger.warning("{} argument type not exported: {}", name, ", ".join(hidden))
            return None
        shape = shape_of(annotation)
        if shape is None:
            logger.debug("method {} parameter {} has unsupported type {}", name, param.name, type_name(annotation))
            return None
        shapes.append(shape)

    returns = hints.get("return")
    outs = typing.get_args(returns) if typing.get_origin(returns) is tuple else ()
    if len(outs) != 2 or outs[1] is Ellipsis:
        logger.debug("method {} has wrong number of outs: {}", name, len(outs))
        return None

    result_type, error_type = outs
    hidden = unexported_types(result_type)
    if hidden:
        logger.warning("{} return type not exported: {}", name, ", ".join(hidden))
        return None
    if not is_error_reporting_type(error_type):
        logger.debug("method {} returns {} not an error type", name, type_name(error_type))
        return None

    return MethodDescriptor(
        name=name,
        argument_shapes=tuple(shapes),
        result_type=result_type,
        invoker=bound,
    )
