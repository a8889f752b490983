"""Stream read loop: terminal events, cancellation and transport failures."""
from __future__ import annotations

from contextlib import contextmanager

import httpx
import pytest

from policy_assistant.base.cancellation import CancellationToken
from policy_assistant.base.streaming import StreamConsumer, StreamController
from policy_assistant.tests.helpers import failing_stream, sse_body, sse_line, split_every


def _starter(chunks):
    @contextmanager
    def _open():
        yield iter(chunks)

    return _open


def _run(chunks, token=None):
    consumer = StreamConsumer(starter=_starter(chunks), token=token)
    return consumer, list(consumer.run())


def test_deltas_then_single_done_terminal(log_capture):
    body = sse_body("Hel", "lo").encode("utf-8")
    consumer, events = _run(split_every(body, 7))
    deltas = [e for e in events if not e.finish]
    assert [e.delta for e in deltas] == ["Hel", "lo"]  # nosec B101
    assert [e.text for e in deltas] == ["Hel", "Hello"]  # nosec B101
    terminal = events[-1]
    assert terminal.finish and terminal.finish_reason == "done" and terminal.text == "Hello"  # nosec B101
    assert sum(1 for e in events if e.finish) == 1  # nosec B101
    assert consumer.metrics.emitted == 2 and consumer.metrics.frames == 3  # nosec B101
    end = log_capture.events("stream.end")
    assert end and end[0]["finish_reason"] == "done" and end[0]["structured"] is True  # nosec B101


def test_reading_stops_after_done():
    pulled = []

    def chunks():
        for chunk in (sse_body("a").encode(), sse_line("b").encode()):
            pulled.append(chunk)
            yield chunk

    consumer = StreamConsumer(starter=_starter(chunks()))
    events = list(consumer.run())
    assert len(pulled) == 1  # nosec B101
    assert events[-1].text == "a"  # nosec B101


def test_body_without_done_ends_closed_and_drops_partial(log_capture):
    chunks = [(sse_line("x") + 'data: {"choi').encode()]
    _, events = _run(chunks)
    assert events[-1].finish_reason == "closed" and events[-1].text == "x"  # nosec B101
    dropped = log_capture.events("stream.partial_discarded")
    assert dropped and dropped[0]["chars"] == len('data: {"choi')  # nosec B101


def test_cancel_before_start_yields_only_cancelled_terminal():
    token = CancellationToken()
    token.cancel("user")
    opened = []

    @contextmanager
    def _open():
        opened.append(True)
        yield iter([sse_body("x").encode()])

    consumer = StreamConsumer(starter=_open, token=token)
    events = list(consumer.run())
    assert opened == []  # nosec B101
    assert len(events) == 1 and events[0].finish_reason == "cancelled"  # nosec B101
    assert events[0].error_code == "cancelled"  # nosec B101


def test_cancel_mid_stream_discards_partial_line():
    token = CancellationToken()
    chunks = [(sse_line("A") + 'data: {"choices":[{"delta":').encode(), b'{"content":"B"}}]}\n']
    consumer = StreamConsumer(starter=_starter(chunks), token=token)
    events = []
    for event in consumer.run():
        events.append(event)
        if event.delta == "A":
            token.cancel("user")
    assert [e.delta for e in events if not e.finish] == ["A"]  # nosec B101
    assert events[-1].finish_reason == "cancelled" and events[-1].text == "A"  # nosec B101
    assert consumer.parser.pending == ""  # nosec B101
    assert consumer.accumulator.result.text == "A"  # nosec B101


def test_transport_error_mid_stream_keeps_partial_text(log_capture):
    chunks = failing_stream([sse_line("par").encode(), sse_line("tial").encode()], httpx.ReadError("reset"))
    consumer = StreamConsumer(starter=_starter(chunks))
    events = list(consumer.run())
    terminal = events[-1]
    assert terminal.finish_reason == "error" and terminal.text == "partial"  # nosec B101
    assert terminal.error_code == "transport" and terminal.error == "reset"  # nosec B101
    assert consumer.accumulator.result.text == "partial"  # nosec B101
    assert log_capture.events("stream.error")  # nosec B101


def test_invalid_utf8_body_is_transport_failure():
    _, events = _run([sse_line("ok").encode(), b"data: \xff\n"])
    assert events[-1].finish_reason == "error" and events[-1].text == "ok"  # nosec B101
    assert events[-1].error_code == "transport"  # nosec B101


def test_unexpected_exception_becomes_internal_error():
    @contextmanager
    def _open():
        raise KeyError("boom")
        yield  # pragma: no cover

    consumer = StreamConsumer(starter=_open)
    events = list(consumer.run())
    assert len(events) == 1 and events[0].error_code == "internal"  # nosec B101


def test_controller_single_pass_and_abandon_cancels():
    token = CancellationToken()
    chunks = [sse_line("a").encode(), sse_line("b").encode(), b"data: [DONE]\n"]
    controller = StreamController(StreamConsumer(starter=_starter(chunks), token=token))
    it = iter(controller)
    first = next(it)
    assert first.delta == "a"  # nosec B101
    it.close()
    assert token.cancelled  # nosec B101
    assert controller.result.finish_reason == "cancelled" and controller.result.text == "a"  # nosec B101
    with pytest.raises(RuntimeError):
        iter(controller)


def test_controller_drain_returns_result():
    chunks = [sse_body("x", "y").encode()]
    controller = StreamController(StreamConsumer(starter=_starter(chunks)))
    result = controller.drain()
    assert result.text == "xy" and result.finish_reason == "done"  # nosec B101
    assert controller.finished and controller.error is None  # nosec B101
    assert controller.terminal_event.finish  # nosec B101


def test_deeply_nested_frame_does_not_end_the_turn():
    body = sse_line("A") + "data: " + "[" * 200000 + "\n" + sse_body("B")
    consumer, events = _run(split_every(body.encode("utf-8"), 4096))
    terminal = events[-1]
    assert terminal.finish_reason == "done" and terminal.error is None  # nosec B101
    assert terminal.text == "AB" and consumer.metrics.malformed == 1  # nosec B101
