"""Utility helpers for ajaxrpc."""
