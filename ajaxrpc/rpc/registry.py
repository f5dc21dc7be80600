"""Service registry: validated, lock-protected table of callable services."""

from __future__ import annotations

import threading
from typing import Any, Iterable

from loguru import logger

from ajaxrpc.rpc.descriptor import Invoker, MethodDescriptor, Service
from ajaxrpc.rpc.introspect import discover_methods
from ajaxrpc.rpc.shapes import TypeShape, is_exported, shape_of, type_name, unexported_types
from ajaxrpc.utils.exceptions import ConfigurationError


class ServiceDefinition:
    """
    Explicit registration table for one service.

    Use this when a receiver cannot be introspected, or to expose plain
    callables::

        definition = ServiceDefinition("Math")
        definition.method("Add", lambda a, b: (a + b, None), arg_types=(float, float))
        registry.register_definition(definition)
    """

    def __init__(self, name: str, receiver: Any = None) -> None:
        self.name = name
        self.receiver = receiver
        self._methods: dict[str, MethodDescriptor] = {}

    def method(
        self,
        name: str,
        invoker: Invoker,
        arg_types: Iterable[Any] = (),
        result_type: Any = Any,
    ) -> ServiceDefinition:
        """Add a method; the invoker must return a ``(result, error)`` pair."""
        if not is_exported(name):
            raise ValueError(f"method name {name!r} is not exported")
        if name in self._methods:
            raise ValueError(f"method {name!r} already defined on {self.name}")
        shapes: list[TypeShape] = []
        for position, arg_type in enumerate(arg_types, start=1):
            hidden = unexported_types(arg_type)
            if hidden:
                raise ValueError(f"{name} argument type not exported: {', '.join(hidden)}")
            shape = shape_of(arg_type)
            if shape is None:
                raise ValueError(f"{name} parameter {position} has unsupported type {type_name(arg_type)}")
            shapes.append(shape)
        self._methods[name] = MethodDescriptor(
            name=name,
            argument_shapes=tuple(shapes),
            result_type=result_type,
            invoker=invoker,
        )
        return self

    @property
    def methods(self) -> dict[str, MethodDescriptor]:
        return dict(self._methods)


class ServiceRegistry:
    """Tracks registered services; registration and lookup are serialized."""

    def __init__(self) -> None:
        self._services: dict[str, Service] = {}
        self._lock = threading.Lock()

    def register(self, instance: Any, name: str | None = None) -> Service:
        """
        Register every eligible method of ``instance``.

        The service name is ``name`` when given, otherwise the instance's type
        name. Raises ConfigurationError when the name is empty, not exported
        (derived names only), already taken, or when no method qualifies.
        """
        use_name = name is not None
        type_label = type(instance).__name__
        service_name = name.strip() if use_name else type_label
        if not service_name:
            raise ConfigurationError.unnamed_service(type_label)
        if not use_name and not is_exported(service_name):
            logger.warning("rpc Register: type {} is not exported", service_name)
            raise ConfigurationError.not_exported(service_name)

        with self._lock:
            if service_name in self._services:
                raise ConfigurationError.duplicate_service(service_name)
            methods = discover_methods(instance)
            if not methods:
                logger.warning("rpc Register: type {} has no exported methods of suitable type", service_name)
                raise ConfigurationError.no_eligible_methods(service_name)
            service = Service(name=service_name, receiver=instance, methods=methods)
            self._services[service_name] = service

        logger.info("Registered service {} with methods: {}", service_name, ", ".join(sorted(methods)))
        return service

    def register_name(self, name: str, instance: Any) -> Service:
        """Register ``instance`` under an explicit service name."""
        return self.register(instance, name=name)

    def register_definition(self, definition: ServiceDefinition) -> Service:
        """Register a service built explicitly with ServiceDefinition."""
        service_name = (definition.name or "").strip()
        if not service_name:
            raise ConfigurationError.unnamed_service(type(definition.receiver).__name__)
        methods = definition.methods

        with self._lock:
            if service_name in self._services:
                raise ConfigurationError.duplicate_service(service_name)
            if not methods:
                raise ConfigurationError.no_eligible_methods(service_name)
            service = Service(name=service_name, receiver=definition.receiver, methods=methods)
            self._services[service_name] = service

        logger.info("Registered service {} with methods: {}", service_name, ", ".join(sorted(methods)))
        return service

    def lookup(self, service_name: str) -> Service | None:
        with self._lock:
            return self._services.get(service_name)

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._services)

    def stats(self) -> dict[str, int]:
        """Call counts keyed by ``Service.Method``."""
        with self._lock:
            services = list(self._services.values())
        return {
            f"{service.name}.{method_name}": descriptor.call_count
            for service in services
            for method_name, descriptor in sorted(service.methods.items())
        }

    def __contains__(self, service_name: object) -> bool:
        with self._lock:
            return service_name in self._services

    def __len__(self) -> int:
        with self._lock:
            return len(self._services)
