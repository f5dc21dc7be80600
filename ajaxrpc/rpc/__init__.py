"""JSON-RPC core: service registry, parameter decoding, dispatch."""

from ajaxrpc.rpc.descriptor import MethodDescriptor, Service
from ajaxrpc.rpc.dispatcher import Dispatcher
from ajaxrpc.rpc.envelope import (
    CONTENT_TYPE,
    BufferedResponseSink,
    RequestEnvelope,
    ResponseEnvelope,
    ResponseSink,
)
from ajaxrpc.rpc.registry import ServiceDefinition, ServiceRegistry
from ajaxrpc.rpc.server import RpcServer
from ajaxrpc.rpc.shapes import ErrorReporter

__all__ = [
    "CONTENT_TYPE",
    "BufferedResponseSink",
    "Dispatcher",
    "ErrorReporter",
    "MethodDescriptor",
    "RequestEnvelope",
    "ResponseEnvelope",
    "ResponseSink",
    "RpcServer",
    "Service",
    "ServiceDefinition",
    "ServiceRegistry",
]
