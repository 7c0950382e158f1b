"""Tests for the dashboard loop, tick clock and CLI entry point."""

from __future__ import annotations

import curses
from unittest.mock import MagicMock, patch

import pytest

from topdash.dashboard import Dashboard, LoopState, TickClock, main, run_dashboard
from topdash.frame import Frame
from topdash.metrics import ProcessRecord, Snapshot


class FakeClock:
    def __init__(self, start: float = 100.0) -> None:
        self.t = start

    def __call__(self) -> float:
        return self.t

    def advance(self, seconds: float) -> None:
        self.t += seconds


class FakeSource:
    def __init__(self, snapshot: Snapshot | None = None) -> None:
        self.snapshot = snapshot or Snapshot()
        self.refreshes = 0

    def refresh(self) -> Snapshot:
        self.refreshes += 1
        return self.snapshot


class FakePainter:
    def __init__(self) -> None:
        self.frames: list[Frame] = []

    def draw(self, frame: Frame) -> None:
        self.frames.append(frame)


class FakeKeys:
    """Replays scripted key presses; None stands for a poll timeout."""

    def __init__(self, keys: list[int | None], clock: FakeClock | None = None) -> None:
        self.keys = list(keys)
        self.timeouts: list[float] = []
        self.clock = clock

    def poll_key(self, timeout: float) -> int | None:
        self.timeouts.append(timeout)
        if self.clock is not None:
            self.clock.advance(timeout)
        return self.keys.pop(0) if self.keys else ord("q")


# ── TickClock ──────────────────────────────────────────────────────────────


class TestTickClock:
    def test_starts_now(self) -> None:
        fake = FakeClock(5.0)
        clock = TickClock(interval=0.8, now=fake)
        assert clock.last_tick == 5.0
        assert clock.remaining() == pytest.approx(0.8)

    def test_remaining_counts_down(self) -> None:
        fake = FakeClock()
        clock = TickClock(interval=0.8, now=fake)
        fake.advance(0.3)
        assert clock.remaining() == pytest.approx(0.5)

    def test_remaining_clamped_when_overrun(self) -> None:
        fake = FakeClock()
        clock = TickClock(interval=0.8, now=fake)
        fake.advance(2.5)
        assert clock.remaining() == 0.0

    def test_no_reset_mid_tick(self) -> None:
        fake = FakeClock()
        clock = TickClock(interval=0.8, now=fake)
        fake.advance(0.2)
        assert clock.maybe_reset() is False
        assert clock.last_tick == 100.0

    def test_reset_after_interval(self) -> None:
        fake = FakeClock()
        clock = TickClock(interval=0.75, now=fake)
        fake.advance(0.75)
        assert clock.maybe_reset() is True
        assert clock.last_tick == 100.75

    def test_default_interval(self) -> None:
        assert TickClock().interval == pytest.approx(0.8)


# ── Dashboard.step ─────────────────────────────────────────────────────────


def _dashboard(
    keys: list[int | None], snapshot: Snapshot | None = None
) -> tuple[Dashboard, FakeSource, FakePainter, FakeKeys, FakeClock]:
    fake = FakeClock()
    source = FakeSource(snapshot)
    painter = FakePainter()
    poller = FakeKeys(keys, fake)
    dash = Dashboard(source, painter, poller, TickClock(interval=0.75, now=fake))
    return dash, source, painter, poller, fake


class TestStep:
    def test_refresh_then_draw(self) -> None:
        snap = Snapshot(
            cpu_percent=12.0,
            memory_total=8000,
            memory_used=4000,
            processes=[ProcessRecord(1, "init", 3.0, 0)],
        )
        dash, source, painter, _, _ = _dashboard([None], snap)

        assert dash.step() is LoopState.RUNNING
        assert source.refreshes == 1
        assert painter.frames[0].cpu_percent == 12
        assert painter.frames[0].memory_percent == 50
        assert len(painter.frames[0].process_lines) == 1

    def test_q_terminates(self) -> None:
        dash, *_ = _dashboard([ord("q")])
        assert dash.step() is LoopState.TERMINATED
        assert dash.state is LoopState.TERMINATED

    @pytest.mark.parametrize("key", [None, ord("x"), ord("Q"), curses.KEY_RESIZE, 27])
    def test_other_input_keeps_running(self, key: int | None) -> None:
        dash, *_ = _dashboard([key])
        assert dash.step() is LoopState.RUNNING

    def test_poll_waits_for_rest_of_tick(self) -> None:
        dash, _, _, poller, fake = _dashboard([None, None])
        fake.advance(0.25)  # time spent before the first poll
        dash.step()
        assert poller.timeouts[0] == 0.5
        # The poll used up the tick, so the next one starts fresh
        dash.step()
        assert poller.timeouts[1] == 0.75

    def test_overrun_tick_polls_without_waiting(self) -> None:
        dash, _, _, poller, fake = _dashboard([None])
        fake.advance(3.0)
        dash.step()
        assert poller.timeouts == [0.0]
        assert dash.clock.last_tick == pytest.approx(103.0)

    def test_early_key_does_not_reset_tick(self) -> None:
        fake = FakeClock()
        poller = MagicMock()
        poller.poll_key.return_value = ord("x")
        clock = TickClock(interval=0.8, now=fake)
        dash = Dashboard(FakeSource(), FakePainter(), poller, clock)

        dash.step()

        assert clock.last_tick == 100.0


# ── Dashboard.run ──────────────────────────────────────────────────────────


def test_run_until_quit() -> None:
    dash, source, painter, poller, _ = _dashboard([None, ord("a"), None, ord("q")])
    dash.run()
    assert dash.state is LoopState.TERMINATED
    assert source.refreshes == 4
    assert len(painter.frames) == 4
    assert len(poller.timeouts) == 4


def test_run_propagates_draw_failure() -> None:
    painter = MagicMock()
    painter.draw.side_effect = curses.error("write failed")
    dash = Dashboard(FakeSource(), painter, FakeKeys([]))
    with pytest.raises(curses.error):
        dash.run()


# ── run_dashboard wiring ───────────────────────────────────────────────────


@patch("topdash.dashboard.Renderer")
@patch("topdash.dashboard.MetricSource")
@patch("topdash.dashboard.TerminalSession")
def test_run_dashboard_releases_session_on_quit(
    mock_session_cls: MagicMock,
    mock_source_cls: MagicMock,
    mock_renderer_cls: MagicMock,
) -> None:
    session = mock_session_cls.return_value.__enter__.return_value
    session.poll_key.return_value = ord("q")
    mock_source_cls.return_value.snapshot = Snapshot()

    run_dashboard()

    mock_renderer_cls.assert_called_once_with(session.window)
    mock_renderer_cls.return_value.draw.assert_called_once()
    mock_session_cls.return_value.__exit__.assert_called_once()


@patch("topdash.dashboard.Renderer")
@patch("topdash.dashboard.MetricSource")
@patch("topdash.dashboard.TerminalSession")
def test_run_dashboard_releases_session_on_error(
    mock_session_cls: MagicMock,
    mock_source_cls: MagicMock,
    mock_renderer_cls: MagicMock,
) -> None:
    mock_session_cls.return_value.__exit__.return_value = False
    mock_renderer_cls.return_value.draw.side_effect = curses.error("gone")
    mock_source_cls.return_value.snapshot = Snapshot()

    with pytest.raises(curses.error):
        run_dashboard()
    mock_session_cls.return_value.__exit__.assert_called_once()


# ── CLI entry point ────────────────────────────────────────────────────────


@patch("topdash.dashboard.run_dashboard")
def test_main_exits_cleanly(mock_run: MagicMock) -> None:
    with patch("sys.argv", ["topdash"]):
        main()
    mock_run.assert_called_once()


@patch("topdash.dashboard.run_dashboard", side_effect=curses.error("no tty"))
def test_main_reports_terminal_error(
    mock_run: MagicMock, capsys: pytest.CaptureFixture[str]
) -> None:
    with patch("sys.argv", ["topdash"]), pytest.raises(SystemExit) as exc_info:
        main()
    assert exc_info.value.code == 1
    assert "topdash: terminal error: no tty" in capsys.readouterr().err


@patch("topdash.dashboard.run_dashboard", side_effect=KeyboardInterrupt)
def test_main_swallows_keyboard_interrupt(mock_run: MagicMock) -> None:
    with patch("sys.argv", ["topdash"]):
        main()


def test_main_rejects_arguments() -> None:
    argv = ["topdash", "--interval", "2"]
    with patch("sys.argv", argv), pytest.raises(SystemExit) as exc_info:
        main()
    assert exc_info.value.code == 2
