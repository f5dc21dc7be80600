"""Request dispatcher: one synchronous pipeline from request bytes to response bytes."""

from __future__ import annotations

from typing import IO, Any

from loguru import logger

from ajaxrpc.rpc.descriptor import MethodDescriptor
from ajaxrpc.rpc.envelope import (
    RequestEnvelope,
    ResponseEnvelope,
    ResponseSink,
    encode_response,
    parse_request,
    read_body,
    write_invalid_request,
    write_response,
)
from ajaxrpc.rpc.error_boundary import (
    error_result,
    invalid_return_result,
    unhandled_exception_result,
    unserializable_result,
)
from ajaxrpc.rpc.params import decode_params
from ajaxrpc.rpc.registry import ServiceRegistry
from ajaxrpc.rpc.shapes import describe_error
from ajaxrpc.utils.exceptions import ApplicationError, ParameterError, ProtocolError, RoutingError


def split_target(target: str) -> tuple[str, str] | None:
    """Split ``Service.Method`` on the first dot; None when there is no dot."""
    service_name, sep, method_name = target.partition(".")
    if not sep:
        return None
    return service_name, method_name


class Dispatcher:
    """Resolves envelopes against a registry, invokes, and writes the reply."""

    def __init__(self, registry: ServiceRegistry) -> None:
        self.registry = registry

    def handle(self, body: bytes | str | IO[bytes], sink: ResponseSink) -> None:
        """Dispatch one request; always writes a complete response to ``sink``."""
        try:
            request = parse_request(read_body(body))
        except (ProtocolError, OSError) as e:
            logger.debug("Rejected malformed RPC request: {}", e)
            write_invalid_request(sink)
            return

        try:
            envelope = self.dispatch(request)
        except Exception as e:
            envelope = unhandled_exception_result(method=request.method, request_id=request.reply_id(), exc=e)
        write_response(sink, self._encode(request.method, envelope))

    def dispatch(self, request: RequestEnvelope) -> ResponseEnvelope:
        """Route, decode, invoke; returns the envelope to send back."""
        request_id = request.reply_id()
        try:
            descriptor = self.resolve(request.method)
            args = decode_params(request.positional(), descriptor.argument_shapes)
        except (RoutingError, ParameterError) as e:
            logger.debug("RPC {} rejected: {}", request.method, e.message)
            return error_result(request_id, e)

        descriptor.increment()
        return self._invoke(request.method, request_id, descriptor, args)

    def resolve(self, target: str) -> MethodDescriptor:
        parts = split_target(target)
        if parts is None:
            raise RoutingError.service_not_found(target)
        service_name, method_name = parts
        service = self.registry.lookup(service_name)
        if service is None:
            raise RoutingError.service_not_found(target)
        descriptor = service.get(method_name)
        if descriptor is None:
            raise RoutingError.method_not_found(target)
        return descriptor

    def _invoke(self, method: str, request_id: Any, descriptor: MethodDescriptor, args: list[Any]) -> ResponseEnvelope:
        try:
            outcome = descriptor.invoke(args)
            if not isinstance(outcome, tuple) or len(outcome) != 2:
                return invalid_return_result(method=method, request_id=request_id, outcome=outcome)
            result, err = outcome
            # description() and __str__ are user code too
            message = describe_error(err)
        except Exception as e:
            return unhandled_exception_result(method=method, request_id=request_id, exc=e)

        if message:
            return error_result(request_id, ApplicationError(message, method=method))
        return ResponseEnvelope(id=request_id, result=result)

    def _encode(self, method: str, envelope: ResponseEnvelope) -> bytes:
        try:
            return encode_response(envelope)
        except (TypeError, ValueError) as e:
            # error envelopes always encode
            return encode_response(unserializable_result(method=method, request_id=envelope.id, exc=e))
