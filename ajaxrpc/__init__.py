"""
ajaxrpc - expose methods of Python objects as JSON-RPC procedures over HTTP.
"""

__version__ = "0.1.0"
__logo__ = "⚡"

from ajaxrpc.rpc import RpcServer, ServiceDefinition, ServiceRegistry

__all__ = ["RpcServer", "ServiceDefinition", "ServiceRegistry", "__version__"]
