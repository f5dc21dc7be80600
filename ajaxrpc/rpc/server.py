"""RpcServer: a registry plus the dispatcher that serves it."""

from __future__ import annotations

from typing import IO, Any

from ajaxrpc.rpc.descriptor import Service
from ajaxrpc.rpc.dispatcher import Dispatcher
from ajaxrpc.rpc.envelope import BufferedResponseSink, ResponseSink
from ajaxrpc.rpc.registry import ServiceDefinition, ServiceRegistry


class RpcServer:
    """
    Owns one ServiceRegistry and dispatches requests against it.

    Transports call ``handle(body, sink)`` once per inbound request.
    """

    def __init__(self, registry: ServiceRegistry | None = None) -> None:
        self.registry = registry or ServiceRegistry()
        self.dispatcher = Dispatcher(self.registry)

    def register(self, instance: Any, name: str | None = None) -> Service:
        return self.registry.register(instance, name=name)

    def register_name(self, name: str, instance: Any) -> Service:
        return self.registry.register_name(name, instance)

    def register_definition(self, definition: ServiceDefinition) -> Service:
        return self.registry.register_definition(definition)

    def handle(self, body: bytes | str | IO[bytes], sink: ResponseSink) -> None:
        self.dispatcher.handle(body, sink)

    def call(self, body: bytes | str) -> BufferedResponseSink:
        """Dispatch in memory and return the filled sink."""
        sink = BufferedResponseSink()
        self.dispatcher.handle(body, sink)
        return sink
