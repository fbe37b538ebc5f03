"""Tests for the in-memory host substrate."""

from __future__ import annotations

import logging

import pytest

from cyclelens.host.base import DecorationRequest, Signal
from cyclelens.host.memory import DecorationLayer, MemoryBuffer, MemoryHost
from cyclelens.types.events import ContentChange, EditEvent


def _record(host: MemoryHost) -> list[EditEvent]:
    events: list[EditEvent] = []
    host.edits.subscribe(events.append)
    return events


class TestSignal:
    def test_delivers_in_subscription_order(self) -> None:
        signal: Signal[int] = Signal("numbers")
        seen: list[tuple[str, int]] = []
        signal.subscribe(lambda n: seen.append(("a", n)))
        signal.subscribe(lambda n: seen.append(("b", n)))
        signal.emit(1)
        assert seen == [("a", 1), ("b", 1)]

    def test_dispose_unsubscribes(self) -> None:
        signal: Signal[int] = Signal()
        seen: list[int] = []
        subscription = signal.subscribe(seen.append)
        subscription.dispose()
        subscription.dispose()
        signal.emit(1)
        assert seen == []
        assert not subscription.active
        assert signal.subscriber_count == 0

    def test_unsubscribe_during_delivery(self) -> None:
        signal: Signal[int] = Signal()
        seen: list[str] = []
        second = None

        def first(_: int) -> None:
            seen.append("first")
            second.dispose()

        signal.subscribe(first)
        second = signal.subscribe(lambda _: seen.append("second"))
        signal.emit(1)
        assert seen == ["first"]

    def test_failing_subscriber_is_isolated(self, caplog: pytest.LogCaptureFixture) -> None:
        signal: Signal[int] = Signal("numbers")
        seen: list[int] = []

        def broken(_: int) -> None:
            raise RuntimeError("boom")

        signal.subscribe(broken)
        signal.subscribe(seen.append)
        with caplog.at_level(logging.WARNING, logger="cyclelens.host.base"):
            signal.emit(7)
        assert seen == [7]
        assert "Subscriber error on signal 'numbers'" in caplog.text


class TestMemoryBuffer:
    def test_lines(self) -> None:
        buffer = MemoryBuffer("a\nb\n")
        assert buffer.lines == ("a", "b", "")
        assert buffer.line_count == 3
        assert buffer.get_text() == "a\nb\n"
        assert buffer.get_text((0, 1)) == "a\nb"

    def test_replace_reports_whole_lines(self, host: MemoryHost) -> None:
        buffer = host.open("move d0,d1\nbra loop")
        events = _record(host)
        change = buffer.replace(0, 5, 0, 7, "a0")
        assert buffer.lines == ("move a0,d1", "bra loop")
        assert change == ContentChange(0, 0, "move a0,d1")
        assert events == [EditEvent(buffer, (change,))]

    def test_replace_across_lines(self, host: MemoryHost) -> None:
        buffer = host.open("one\ntwo\nthree")
        change = buffer.replace(0, 1, 2, 2, "X")
        assert buffer.lines == ("oXree",)
        assert change == ContentChange(0, 2, "oXree")

    def test_replace_out_of_bounds(self) -> None:
        buffer = MemoryBuffer("a")
        with pytest.raises(IndexError):
            buffer.replace(0, 0, 1, 0, "")

    def test_insert_lines(self) -> None:
        buffer = MemoryBuffer("a\nb")
        assert buffer.insert_lines(1, "x") == ContentChange(1, 1, "x\nb")
        assert buffer.lines == ("a", "x", "b")

    def test_insert_lines_at_end(self) -> None:
        buffer = MemoryBuffer("a\nb")
        assert buffer.insert_lines(5, "z") == ContentChange(1, 1, "b\nz")
        assert buffer.lines == ("a", "b", "z")

    def test_delete_lines(self) -> None:
        buffer = MemoryBuffer("a\nb\nc")
        assert buffer.delete_lines(0, 0) == ContentChange(0, 1, "b")
        assert buffer.lines == ("b", "c")

    def test_delete_last_lines(self) -> None:
        buffer = MemoryBuffer("a\nb\nc")
        assert buffer.delete_lines(1, 2) == ContentChange(0, 2, "a")
        assert buffer.lines == ("a",)

    def test_delete_everything_leaves_one_line(self) -> None:
        buffer = MemoryBuffer("a\nb")
        buffer.delete_lines(0, 1)
        assert buffer.lines == ("",)

    def test_set_text(self) -> None:
        buffer = MemoryBuffer("a\nb")
        assert buffer.set_text("x") == ContentChange(0, 1, "x")

    def test_batch_emits_once(self, host: MemoryHost) -> None:
        buffer = host.open("a")
        events = _record(host)
        with buffer.batch():
            buffer.insert_lines(0, "x")
            buffer.insert_lines(0, "y")
            assert events == []
        assert len(events) == 1
        assert [c.text for c in events[0].changes] == ["x\na", "y\nx"]

    def test_nested_batch_joins_outer(self, host: MemoryHost) -> None:
        buffer = host.open("a")
        events = _record(host)
        with buffer.batch():
            buffer.insert_lines(0, "x")
            with buffer.batch():
                buffer.insert_lines(0, "y")
            assert events == []
            buffer.insert_lines(0, "z")
        assert len(events) == 1
        assert [c.text for c in events[0].changes] == ["x\na", "y\nx", "z\ny"]
        assert buffer.lines == ("z", "y", "x", "a")

    def test_empty_batch_emits_nothing(self, host: MemoryHost) -> None:
        buffer = host.open("a")
        events = _record(host)
        with buffer.batch():
            pass
        assert events == []

    def test_detached_buffer_emits_nothing(self) -> None:
        buffer = MemoryBuffer("a")
        buffer.insert_lines(0, "x")
        assert buffer.lines == ("x", "a")

    def test_buffer_ids(self) -> None:
        assert MemoryBuffer(buffer_id="main.s").buffer_id == "main.s"
        assert MemoryBuffer().buffer_id != MemoryBuffer().buffer_id


class TestDecorationLayer:
    def test_add_move_dispose(self) -> None:
        changes: list[None] = []
        layer = DecorationLayer(on_change=lambda: changes.append(None))
        first = layer.add(DecorationRequest(0, "4", "green"))
        second = layer.add(DecorationRequest(2, "8", "red", detail="8 cycles"))
        assert layer.live_count == 2
        assert layer.render_lines(3) == ["4", "", "8"]

        first.move_to(1)
        assert layer.at(1) == [first]
        assert layer.decorations() == [first, second]

        second.dispose()
        second.dispose()
        assert layer.live_count == 1
        assert second.disposed
        assert len(changes) == 4

    def test_moving_disposed_handle_is_ignored(self) -> None:
        layer = DecorationLayer()
        handle = layer.add(DecorationRequest(0, "4", "green"))
        handle.dispose()
        handle.move_to(3)
        assert handle.line == 0

    def test_render_skips_lines_outside_buffer(self) -> None:
        layer = DecorationLayer()
        layer.add(DecorationRequest(5, "4", "green"))
        assert layer.render_lines(2) == ["", ""]

    def test_request_fields_exposed(self) -> None:
        handle = DecorationLayer().add(DecorationRequest(1, "10 8  2", "#89dceb", "taken / not taken"))
        assert (handle.line, handle.label, handle.color, handle.detail) == (
            1,
            "10 8  2",
            "#89dceb",
            "taken / not taken",
        )


class TestMemoryHost:
    def test_open_activates(self, host: MemoryHost) -> None:
        views = []
        host.active_views.subscribe(views.append)
        buffer = host.open("a")
        assert host.active_buffer() is buffer
        assert [v.buffer for v in views] == [buffer]

    def test_open_without_activation(self, host: MemoryHost) -> None:
        host.open("a", activate=False)
        assert host.active_buffer() is None

    def test_selection(self, host: MemoryHost) -> None:
        buffer = host.open("a\nb")
        selections = []
        host.selections.subscribe(selections.append)
        host.select(buffer, 0, 1)
        assert host.selection(buffer) == (0, 1)
        assert (selections[0].start_line, selections[0].end_line) == (0, 1)

    def test_close(self, host: MemoryHost) -> None:
        buffer = host.open("a")
        host.select(buffer, 0, 0)
        closed = []
        host.closes.subscribe(lambda e: closed.append(e.buffer))
        host.close(buffer)
        assert closed == [buffer]
        assert buffer not in host.buffers
        assert host.active_buffer() is None
        assert host.selection(buffer) is None

    def test_status_owner(self, host: MemoryHost) -> None:
        first, second = host.open("a"), host.open("b")
        host.set_status(first, "Bytes: 2 Cycles: 4")
        host.hide_status(second)
        assert host.status_visible
        assert host.status_owner is first
        host.hide_status(first)
        assert not host.status_visible

    def test_decorate_uses_buffer_layer(self, host: MemoryHost) -> None:
        buffer = host.open("a\nb")
        host.decorate(buffer, DecorationRequest(1, "4", "green"))
        assert host.render_lines(buffer) == ["", "4"]
        assert host.live_decoration_count(buffer) == 1
