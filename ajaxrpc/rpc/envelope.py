"""Request/response envelopes, the response encoder, and response sinks."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import IO, Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, PrivateAttr, ValidationError
from pydantic_core import PydanticSerializationError, to_jsonable_python

from ajaxrpc.utils.exceptions import ProtocolError

CONTENT_TYPE = "application/json; charset=utf-8"

# Written verbatim when the request cannot be parsed at all; no id is known.
INVALID_REQUEST_BODY = b'{"jsonrpc": "2.0", "id": null, "error": "Invalid JSON-RPC."}'

_WHITESPACE = re.compile(r"[ \t\n\r]*")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


_DECODER = json.JSONDecoder(parse_constant=_reject_constant)


class RawJson(str):
    """JSON source text that is written back into a response unchanged."""


class RequestEnvelope(BaseModel):
    """Inbound call: opaque id, ``Service.Method`` target, positional params."""

    model_config = ConfigDict(extra="ignore")

    id: Any = None
    method: str
    params: list[Any] | None = None

    _raw_id: str | None = PrivateAttr(default=None)

    def positional(self) -> list[Any]:
        return list(self.params or [])

    def reply_id(self) -> Any:
        """Id to echo: the request's own id text when known, else the parsed value."""
        if self._raw_id is not None:
            return RawJson(self._raw_id)
        return self.id

@dataclass(slots=True)
class ResponseEnvelope:
    """Outbound reply; exactly one of result/error is serialized."""

    id: Any
    result: Any = None
    error: str | None = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> dict[str, Any]:
        if self.error is not None:
            return {"id": self.id, "error": self.error}
        return {"id": self.id, "result": self.result}


@runtime_checkable
class ResponseSink(Protocol):
    """What the dispatcher needs from a transport to send a reply."""

    def set_header(self, name: str, value: str) -> None:
        ...

    def write(self, data: bytes) -> Any:
        ...


@dataclass
class BufferedResponseSink:
    """Collects headers and body for transports that build a response afterwards."""

    headers: dict[str, str] = field(default_factory=dict)
    body: bytearray = field(default_factory=bytearray)

    def set_header(self, name: str, value: str) -> None:
        self.headers[name] = value

    def write(self, data: bytes) -> int:
        self.body.extend(data)
        return len(data)

    def getvalue(self) -> bytes:
        return bytes(self.body)

    def json(self) -> Any:
        return json.loads(self.getvalue())


def read_body(body: bytes | bytearray | str | IO[bytes]) -> bytes:
    """Accept raw bytes, text, or a readable binary stream."""
    if isinstance(body, (bytes, bytearray)):
        return bytes(body)
    if isinstance(body, str):
        return body.encode("utf-8")
    return body.read()


def parse_request(raw: bytes) -> RequestEnvelope:
    """Decode the request envelope; raises ProtocolError on any malformed input."""
    try:
        request = RequestEnvelope.model_validate_json(raw)
    except ValidationError as e:
        raise ProtocolError(reason=f"{e.error_count()} validation error(s)") from e
    try:
        request._raw_id = extract_raw_id(raw.decode("utf-8"))
    except ValueError as e:
        raise ProtocolError(reason=str(e)) from e
    return request


def _skip_whitespace(text: str, idx: int) -> int:
    return _WHITESPACE.match(text, idx).end()


def extract_raw_id(text: str) -> str | None:
    """
    Source text of the top-level ``id`` member of a JSON object.

    Returns None when the object has no ``id``; a repeated key resolves to its
    last occurrence. Raises ValueError on malformed JSON, including the
    NaN/Infinity extensions.
    """
    idx = _skip_whitespace(text, 0)
    if not text.startswith("{", idx):
        raise ValueError("request is not a JSON object")
    idx = _skip_whitespace(text, idx + 1)
    if text.startswith("}", idx):
        return None

    raw_id = None
    while True:
        key, idx = _DECODER.raw_decode(text, idx)
        if not isinstance(key, str):
            raise ValueError(f"object key at {idx} is not a string")
        idx = _skip_whitespace(text, idx)
        if not text.startswith(":", idx):
            raise ValueError(f"expected ':' at {idx}")
        start = _skip_whitespace(text, idx + 1)
        _, idx = _DECODER.raw_decode(text, start)
        if key == "id":
            raw_id = text[start:idx]
        idx = _skip_whitespace(text, idx)
        if text.startswith(",", idx):
            idx = _skip_whitespace(text, idx + 1)
        elif text.startswith("}", idx):
            return raw_id
        else:
            raise ValueError(f"expected ',' or '}}' at {idx}")


def _dumps(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, allow_nan=False)


def encode_response(envelope: ResponseEnvelope) -> bytes:
    """
    Serialize an envelope; raises TypeError or ValueError when the result is not JSON-safe.

    A RawJson id is spliced in as-is, so the caller gets back exactly the text it sent.
    """
    payload = envelope.to_dict()
    request_id = payload.pop("id")
    if not envelope.is_error:
        try:
            payload["result"] = to_jsonable_python(envelope.result)
        except PydanticSerializationError as e:
            raise TypeError(str(e)) from e
    id_text = request_id if isinstance(request_id, RawJson) else _dumps(request_id)
    members = _dumps(payload)
    return ('{"id": ' + id_text + ", " + members[1:]).encode("utf-8")


def write_response(sink: ResponseSink, body: bytes) -> None:
    sink.set_header("Content-Type", CONTENT_TYPE)
    sink.write(body)


def write_invalid_request(sink: ResponseSink) -> None:
    write_response(sink, INVALID_REQUEST_BODY)
