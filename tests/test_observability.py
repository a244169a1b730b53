import math

from hbasecalls.messages import RequestHeader, RPCTInfo
from hbasecalls.metrics import Histogram
from hbasecalls.observability import (
    RequestTracePropagator,
    SpanContext,
    observe_with_trace,
)

TRACE_ID = int("ab" * 16, 16)


class _PlainObserver:
    def __init__(self):
        self.calls = []

    def observe(self, value):
        self.calls.append(value)


def test_get_without_header_is_empty():
    assert RequestTracePropagator(None).get("traceparent") == ""
    assert RequestTracePropagator(RequestHeader()).get("traceparent") == ""


def test_keys_without_trace_info_is_empty():
    assert RequestTracePropagator(None).keys() == []
    assert RequestTracePropagator(RequestHeader()).keys() == []


def test_set_without_header_does_nothing():
    propagator = RequestTracePropagator(None)
    propagator.set("k", "v")
    assert propagator.get("k") == ""
    assert propagator.request_header is None


def test_set_creates_trace_info_and_round_trips():
    header = RequestHeader()
    propagator = RequestTracePropagator(header)
    propagator.set("traceparent", "value-1")
    propagator.set("tracestate", "value-2")
    assert header.trace_info == RPCTInfo(headers={"traceparent": "value-1",
                                                  "tracestate": "value-2"})
    assert propagator.get("traceparent") == "value-1"
    assert sorted(propagator.keys()) == ["traceparent", "tracestate"]


def test_set_overwrites_existing_value():
    header = RequestHeader(trace_info=RPCTInfo(headers={"k": "old"}))
    propagator = RequestTracePropagator(header)
    propagator.set("k", "new")
    assert propagator.get("k") == "new"
    assert propagator.keys() == ["k"]


def test_span_context_hex_trace_id():
    ctx = SpanContext(trace_id=TRACE_ID, span_id=1, sampled=True)
    assert ctx.trace_id_hex == "ab" * 16
    assert ctx.has_trace_id
    assert not SpanContext().has_trace_id


def test_sampled_span_attaches_exemplar():
    hist = Histogram("h", "help", [1], ("operation",))
    ctx = SpanContext(trace_id=TRACE_ID, span_id=1, sampled=True)
    observe_with_trace(ctx, hist.labels("Get"), 0.5)
    assert hist.exemplars("Get") == {1.0: ({"traceID": "ab" * 16}, 0.5)}
    assert hist.bucket_counts("Get")[math.inf] == 1


def test_unsampled_span_observes_without_exemplar():
    hist = Histogram("h", "help", [1])
    ctx = SpanContext(trace_id=TRACE_ID, span_id=1, sampled=False)
    observe_with_trace(ctx, hist, 0.5)
    assert hist.exemplars() == {}
    assert hist.bucket_counts()[math.inf] == 1


def test_missing_trace_id_observes_without_exemplar():
    hist = Histogram("h", "help", [1])
    observe_with_trace(SpanContext(sampled=True), hist, 2.0)
    observe_with_trace(None, hist, 2.0)
    assert hist.exemplars() == {}
    assert hist.bucket_counts()[math.inf] == 2


def test_observer_without_exemplar_support():
    observer = _PlainObserver()
    ctx = SpanContext(trace_id=TRACE_ID, span_id=1, sampled=True)
    observe_with_trace(ctx, observer, 0.25)
    assert observer.calls == [0.25]