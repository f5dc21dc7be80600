"""Pytest hooks and fixtures."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

import pytest
from pydantic import BaseModel

from ajaxrpc.rpc.server import RpcServer


def pytest_configure(config):
    """Register custom markers (also in pyproject.toml)."""
    config.addinivalue_line("markers", "slow: concurrency tests that spin up many threads")


class A(BaseModel):
    x: str
    y: int


@dataclass
class Point:
    x: int
    y: int


class Problem:
    """Error value that is not an exception, only describable."""

    def __init__(self, text: str):
        self.text = text

    def description(self) -> str:
        return self.text


class TestService:
    __test__ = False

    def Add(self, a: float, b: float) -> tuple[float, Exception | None]:
        return a + b, None

    def Repeat(self, obj: A) -> tuple[str, Exception | None]:
        return obj.x * obj.y, None

    def ObjAdd(self, obj1: A, obj2: A) -> tuple[A, Exception | None]:
        return A(x=obj1.x + obj2.x, y=obj1.y + obj2.y), None

    def Unrepeat(self, text: str) -> tuple[A, Exception | None]:
        unit = -1
        for i in range(1, len(text) // 2):
            if text[0:i] == text[i:i * 2]:
                unit = i
                break
        if unit > 0:
            return A(x=text[0:unit], y=len(text) // unit), None
        return A(x=text, y=1), None

    def Divide(self, a: int, b: int) -> tuple[float, ValueError | None]:
        if b == 0:
            return 0.0, ValueError("division by zero")
        return a / b, None

    def Scale(self, point: Point, factor: int) -> tuple[Point, Exception | None]:
        return Point(x=point.x * factor, y=point.y * factor), None

    def Sum(self, values: list[int]) -> tuple[int, Exception | None]:
        return sum(values), None

    def Check(self, flag: bool) -> tuple[str, Problem | None]:
        if not flag:
            return "", Problem("flag must be set")
        return "ok", None

    def Nothing(self) -> tuple[None, Exception | None]:
        return None, None

    def Explode(self) -> tuple[int, Exception | None]:
        raise RuntimeError("boom")

    def helper(self, value):
        return value


@pytest.fixture
def rpc_server() -> RpcServer:
    server = RpcServer()
    server.register(TestService())
    return server


@pytest.fixture
def call(rpc_server):
    """Dispatch a request (dict or raw text) and return the decoded response."""

    def _call(request: Any) -> dict[str, Any]:
        body = request if isinstance(request, (str, bytes)) else json.dumps(request)
        return rpc_server.call(body).json()

    return _call
