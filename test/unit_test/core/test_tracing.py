"""
Unit tests for span scoping.

This test suite covers:
- Span naming, kind and status on success and on error
- Exception recording and re-raising
- Exactly-once span closure on every exit path
- The decorator form handing the span to the operation
"""

from unittest.mock import MagicMock

import pytest
from opentelemetry import trace
from opentelemetry.trace import SpanKind, StatusCode

from joke_api.core.tracing import span_scope, with_span


class TestSpanScope:
    def test_success_marks_status_ok(self, tracer, span_exporter):
        with span_scope("unit.work", tracer=tracer) as span:
            span.set_attribute("answer", 42)

        (finished,) = span_exporter.get_finished_spans()
        assert finished.name == "unit.work"
        assert finished.kind == SpanKind.SERVER
        assert finished.status.status_code == StatusCode.OK
        assert finished.attributes["answer"] == 42

    def test_error_is_recorded_and_reraised(self, tracer, span_exporter):
        error = ValueError("thread exploded")

        with pytest.raises(ValueError) as exc_info:
            with span_scope("unit.work", tracer=tracer):
                raise error

        assert exc_info.value is error
        (finished,) = span_exporter.get_finished_spans()
        assert finished.status.status_code == StatusCode.ERROR
        assert finished.status.description == "thread exploded"
        exception_events = [e for e in finished.events if e.name == "exception"]
        assert len(exception_events) == 1
        assert exception_events[0].attributes["exception.type"] == "ValueError"

    def test_custom_kind(self, tracer, span_exporter):
        with span_scope("unit.work", kind=SpanKind.INTERNAL, tracer=tracer):
            pass

        assert span_exporter.get_finished_spans()[0].kind == SpanKind.INTERNAL

    def test_span_is_current_inside_scope(self, tracer):
        with span_scope("unit.work", tracer=tracer) as span:
            assert trace.get_current_span() is span

    @pytest.mark.parametrize("fail", [False, True])
    def test_span_ended_exactly_once(self, fail):
        span = MagicMock()
        mock_tracer = MagicMock()
        mock_tracer.start_span.return_value = span

        try:
            with span_scope("unit.work", tracer=mock_tracer):
                if fail:
                    raise RuntimeError("boom")
        except RuntimeError:
            pass

        span.end.assert_called_once()
        mock_tracer.start_span.assert_called_once_with("unit.work", kind=SpanKind.SERVER)

    def test_default_tracer_is_a_safe_no_op(self):
        # Without a configured provider the API hands back non-recording spans.
        with span_scope("unit.work") as span:
            span.set_attribute("k", "v")
            span.add_event("e", {"k": "v"})


class TestWithSpan:
    @pytest.mark.asyncio
    async def test_passes_span_and_returns_result(self, tracer, span_exporter):
        class Operation:
            def __init__(self):
                self.tracer = tracer

            @with_span("op.run")
            async def run(self, value, *, span):
                span.set_attribute("value", value)
                return value * 2

        assert await Operation().run(21) == 42
        (finished,) = span_exporter.get_finished_spans()
        assert finished.name == "op.run"
        assert finished.attributes["value"] == 21
        assert finished.status.status_code == StatusCode.OK

    @pytest.mark.asyncio
    async def test_error_propagates_through_decorator(self, tracer, span_exporter):
        class Operation:
            def __init__(self):
                self.tracer = tracer

            @with_span("op.run")
            async def run(self, *, span):
                raise LookupError("missing")

        with pytest.raises(LookupError):
            await Operation().run()

        (finished,) = span_exporter.get_finished_spans()
        assert finished.status.status_code == StatusCode.ERROR
        assert finished.end_time is not None
