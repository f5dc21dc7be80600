"""Command line interface for ajaxrpc."""
