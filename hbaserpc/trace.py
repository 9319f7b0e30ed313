"""Carrying trace context in the trace-info headers of a request header."""

from dataclasses import dataclass
from typing import Any


@dataclass
class RPCTInfo:
    trace_id: int | None = None
    parent_id: int | None = None
    headers: dict[str, str] | None = None


@dataclass
class RequestHeader:
    call_id: int | None = None
    trace_info: RPCTInfo | None = None
    method_name: str | None = None
    request_param: bool | None = None
    cell_block_meta: Any = None
    priority: int | None = None
    timeout: int | None = None


class RequestTracePropagator:
    """Text-map carrier reading and writing the trace headers of a request header."""

    def __init__(self, request_header: RequestHeader | None = None) -> None:
        self.request_header = request_header

    def _headers(self) -> dict[str, str] | None:
        header = self.request_header
        if header is None or header.trace_info is None:
            return None
        return header.trace_info.headers

    def get(self, key: str) -> str:
        """Value of a trace header, or an empty string."""
        headers = self._headers()
        if headers is None:
            return ""
        return headers.get(key, "")

    def set(self, key: str, value: str) -> None:
        """Set a trace header; does nothing without a request header."""
        header = self.request_header
        if header is None:
            return
        if header.trace_info is None:
            header.trace_info = RPCTInfo(headers={})
        if header.trace_info.headers is None:
            header.trace_info.headers = {}
        header.trace_info.headers[key] = value

    def keys(self) -> list[str]:
        """Names of all trace headers."""
        headers = self._headers()
        if headers is None:
            return []
        return list(headers)