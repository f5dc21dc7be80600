"""HTTP binding and demo page."""

from ajaxrpc.api.server import create_app

__all__ = ["create_app"]
