"""Per-method and per-service metadata kept by the registry."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable

from ajaxrpc.rpc.shapes import TypeShape

# Invoker: decoded positional arguments in, (result, error) pair out.
Invoker = Callable[..., Any]


@dataclass(eq=False)
class MethodDescriptor:
    """One remotely callable method: argument shapes, result type, call counter."""

    name: str
    argument_shapes: tuple[TypeShape, ...]
    result_type: Any
    invoker: Invoker
    _call_count: int = field(default=0, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    @property
    def arity(self) -> int:
        return len(self.argument_shapes)

    @property
    def call_count(self) -> int:
        with self._lock:
            return self._call_count

    def increment(self) -> int:
        """Count one invocation; safe under concurrent requests."""
        with self._lock:
            self._call_count += 1
            return self._call_count

    def invoke(self, args: list[Any]) -> Any:
        return self.invoker(*args)


@dataclass(eq=False)
class Service:
    """A named group of methods bound to one receiver."""

    name: str
    receiver: Any
    methods: dict[str, MethodDescriptor] = field(default_factory=dict)

    def get(self, method_name: str) -> MethodDescriptor | None:
        return self.methods.get(method_name)
