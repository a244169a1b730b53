"""Trace propagation through request headers and trace-aware observations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .messages import RequestHeader, RPCTInfo

TRACER_NAME = "hbasecalls"


@dataclass(frozen=True)
class SpanContext:
    """Identity of a span: trace id, span id and whether it is sampled."""

    trace_id: int = 0
    span_id: int = 0
    sampled: bool = False

    @property
    def has_trace_id(self) -> bool:
        return self.trace_id != 0

    @property
    def trace_id_hex(self) -> str:
        """The trace id as 32 lower-case hex digits."""
        return f"{self.trace_id:032x}"


@dataclass
class RequestTracePropagator:
    """Carries trace headers in the trace info of a request header."""

    request_header: RequestHeader | None = None

    def get(self, key: str) -> str:
        """The header value for ``key``, or an empty string."""
        header = self.request_header
        if header is None or header.trace_info is None:
            return ""
        return header.trace_info.headers.get(key, "")

    def set(self, key: str, value: str) -> None:
        """Store a header value, creating the trace info if needed."""
        header = self.request_header
        if header is None:
            return
        if header.trace_info is None:
            header.trace_info = RPCTInfo()
        header.trace_info.headers[key] = value

    def keys(self) -> list[str]:
        """All header keys present."""
        header = self.request_header
        if header is None or header.trace_info is None:
            return []
        return list(header.trace_info.headers)


def observe_with_trace(span_context: SpanContext | None, observer: Any, value: float) -> None:
    """Observe ``value``, attaching the trace id as exemplar when it can be."""
    if (span_context is not None and span_context.sampled and span_context.has_trace_id
            and getattr(observer, "accepts_exemplars", False)):
        observer.observe(value, exemplar={"traceID": span_context.trace_id_hex})
        return
    observer.observe(value)