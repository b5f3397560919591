"""Tests for the PollLoop class."""

import logging
import time

from conftest import FakeProvider, FakeShell

from gouge.models import MenuSlot, NetworkRateState
from gouge.monitor import PollLoop
from gouge.sampler import MetricsSampler


def wait_until(predicate, timeout: float = 2.0) -> bool:
    """Poll predicate until it is true or timeout expires."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


class TestPollLoop:
    """Tests for PollLoop lifecycle."""

    def test_loop_creation(self, shell):
        """Test PollLoop can be instantiated."""
        loop = PollLoop(shell, MetricsSampler(FakeProvider()))

        assert loop.interval == 2.0
        assert not loop.is_running
        assert loop.state == NetworkRateState()

    def test_loop_start_stop(self, shell):
        """Test PollLoop can be started and stopped."""
        loop = PollLoop(shell, MetricsSampler(FakeProvider()), interval=0.1)

        assert not loop.is_running

        loop.start()
        assert loop.is_running

        loop.stop()
        assert not loop.is_running

    def test_loop_start_idempotent(self, shell):
        """Test starting an already running loop is safe."""
        loop = PollLoop(shell, MetricsSampler(FakeProvider()), interval=0.1)

        loop.start()
        ticker1 = loop._ticker
        waiter1 = loop._quit_waiter

        loop.start()  # Should not create new threads
        assert loop._ticker is ticker1
        assert loop._quit_waiter is waiter1
        loop.stop()

    def test_daemon_threads(self, shell):
        """Test both background threads are named daemon threads."""
        loop = PollLoop(shell, MetricsSampler(FakeProvider()), interval=0.1)

        loop.start()

        try:
            assert loop._ticker is not None
            assert loop._ticker.daemon is True
            assert loop._ticker.name == "PollLoop-ticker"
            assert loop._quit_waiter is not None
            assert loop._quit_waiter.daemon is True
            assert loop._quit_waiter.name == "PollLoop-quit"
        finally:
            loop.stop()

    def test_start_resets_network_state(self, shell):
        """Test the carried counters are cleared every time the loop starts."""
        loop = PollLoop(shell, MetricsSampler(FakeProvider()), interval=10.0)
        loop.run_cycle()
        assert loop.state != NetworkRateState()

        loop.start()
        try:
            assert loop.state == NetworkRateState()
        finally:
            loop.stop()


class TestRunCycle:
    """Tests for a single sampling cycle."""

    def test_cycle_updates_every_slot(self, shell):
        """Test a successful cycle writes all five texts."""
        loop = PollLoop(shell, MetricsSampler(FakeProvider()))

        assert loop.run_cycle() is True

        assert shell.updates == 5
        assert shell.texts[MenuSlot.CPU] == "CPU: 42.4%"
        assert shell.texts[MenuSlot.RAM] == "RAM: 55.0%"
        assert shell.texts[MenuSlot.UPTIME] == "Uptime: 1 d, 1 h, 2 m"
        assert shell.texts[MenuSlot.NETWORK] == "Network: Sent: 0.00 MB/s, Received: 0.00 MB/s"

    def test_state_carried_between_cycles(self, shell):
        """Test the second cycle reports a rate from the first cycle's counters."""
        provider = FakeProvider(counters=(1048576, 1048576))
        loop = PollLoop(shell, MetricsSampler(provider))

        loop.run_cycle()
        provider.counters = (3145728, 1048576)
        loop.run_cycle()

        assert shell.texts[MenuSlot.NETWORK] == "Network: Sent: 1.00 MB/s, Received: 0.00 MB/s"
        assert loop.state == NetworkRateState(3145728, 1048576)

    def test_failed_cycle_leaves_texts_unchanged(self, shell, caplog):
        """Test a disk failure blocks every update for that cycle and is logged."""
        provider = FakeProvider()
        loop = PollLoop(shell, MetricsSampler(provider))
        loop.run_cycle()
        before = dict(shell.texts)
        state_before = loop.state

        provider.cpu = 99.0
        provider.ram = 99.0
        provider.fail = "disk"
        with caplog.at_level(logging.ERROR, logger="gouge.monitor"):
            assert loop.run_cycle() is False

        assert shell.texts == before
        assert shell.texts[MenuSlot.CPU] == "CPU: 42.4%"
        assert loop.state == state_before
        assert "Error getting disk" in caplog.text

    def test_failed_first_cycle_keeps_placeholders(self, shell):
        """Test placeholders remain when the very first cycle fails."""
        loop = PollLoop(shell, MetricsSampler(FakeProvider(fail="cpu")))

        assert loop.run_cycle() is False
        assert shell.texts[MenuSlot.CPU] == "CPU: -"
        assert shell.updates == 0


class TestTicker:
    """Tests for the background ticker."""

    def test_ticker_updates_shell(self, shell):
        """Test the ticker keeps pushing texts to the shell."""
        loop = PollLoop(shell, MetricsSampler(FakeProvider()), interval=0.05)

        loop.start()
        try:
            assert wait_until(lambda: shell.updates >= 10)
        finally:
            loop.stop()

    def test_ticker_waits_before_first_cycle(self, shell):
        """Test nothing is sampled until the first interval has elapsed."""
        loop = PollLoop(shell, MetricsSampler(FakeProvider()), interval=10.0)

        loop.start()
        try:
            time.sleep(0.2)
            assert shell.updates == 0
        finally:
            loop.stop()

    def test_ticker_survives_failures(self, shell):
        """Test cycles after a failure proceed normally."""
        provider = FakeProvider(fail="network")
        loop = PollLoop(shell, MetricsSampler(provider), interval=0.05)

        loop.start()
        try:
            assert wait_until(lambda: len(provider.calls) >= 10)
            assert shell.updates == 0

            provider.fail = None
            assert wait_until(lambda: shell.updates >= 5)
        finally:
            loop.stop()

    def test_ticker_survives_unexpected_errors(self, shell, caplog):
        """Test an unexpected sampler error is logged and the loop continues."""
        calls = []

        class FlakySampler(MetricsSampler):
            def sample_and_format(self, state):
                calls.append(state)
                if len(calls) == 1:
                    raise ValueError("boom")
                return super().sample_and_format(state)

        loop = PollLoop(shell, FlakySampler(FakeProvider()), interval=0.05)

        with caplog.at_level(logging.ERROR, logger="gouge.monitor"):
            loop.start()
            try:
                assert wait_until(lambda: shell.updates >= 5)
            finally:
                loop.stop()

        assert "Unexpected error during sampling cycle" in caplog.text


class TestQuitWait:
    """Tests for the quit waiter."""

    def test_quit_requests_termination(self, shell):
        """Test the quit event makes the loop terminate the shell."""
        loop = PollLoop(shell, MetricsSampler(FakeProvider()), interval=0.1)

        loop.start()
        try:
            assert not shell.terminated.is_set()
            shell.quit_requested.set()
            assert shell.terminated.wait(timeout=1.0)
        finally:
            loop.stop()

    def test_quit_while_ticker_sleeps(self):
        """Test quit is honoured promptly even mid-interval."""
        shell = FakeShell()
        loop = PollLoop(shell, MetricsSampler(FakeProvider()), interval=30.0)

        loop.start()
        try:
            started = time.monotonic()
            shell.quit_requested.set()
            assert shell.terminated.wait(timeout=1.0)
            assert time.monotonic() - started < 1.0
        finally:
            loop.stop()

    def test_no_termination_without_quit(self, shell):
        """Test the waiter blocks until the quit event arrives."""
        loop = PollLoop(shell, MetricsSampler(FakeProvider()), interval=0.05)

        loop.start()
        try:
            assert not shell.terminated.wait(timeout=0.3)
        finally:
            loop.stop()
