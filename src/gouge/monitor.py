"""Polling loop that drives the sampler for gouge."""

import logging
import threading
from typing import Protocol

from gouge.config import REFRESH_INTERVAL
from gouge.models import MenuSlot, NetworkRateState
from gouge.sampler import MetricQueryError, MetricsSampler

logger = logging.getLogger(__name__)


class DisplayShell(Protocol):
    """The part of a UI shell the poll loop talks to."""

    quit_requested: threading.Event

    def set_display_text(self, slot: MenuSlot, text: str) -> None: ...

    def request_terminate(self) -> None: ...


class PollLoop:
    """
    Samples metrics on a fixed cadence and pushes the texts to a shell.

    Runs two daemon threads: a ticker that samples every `interval` seconds,
    and a waiter that blocks on the shell's quit event and then asks the
    shell to terminate. The network rate state is owned by the ticker.
    """

    def __init__(
        self,
        shell: DisplayShell,
        sampler: MetricsSampler | None = None,
        interval: float = REFRESH_INTERVAL,
    ) -> None:
        """
        Initialize the PollLoop.

        Args:
            shell: UI shell receiving display texts and owning the quit event.
            sampler: Metrics sampler. Defaults to a psutil-backed sampler.
            interval: Seconds to wait before each cycle. Default 2.0s.
        """
        self._shell = shell
        self._sampler = sampler if sampler is not None else MetricsSampler()
        self._interval = interval
        self._stop_event = threading.Event()
        self._ticker: threading.Thread | None = None
        self._quit_waiter: threading.Thread | None = None
        self._state = NetworkRateState()

    @property
    def interval(self) -> float:
        """Get the cycle interval."""
        return self._interval

    @property
    def state(self) -> NetworkRateState:
        """Get the network counters carried to the next cycle."""
        return self._state

    @property
    def is_running(self) -> bool:
        """Check if the ticker thread is running."""
        return self._ticker is not None and self._ticker.is_alive()

    def start(self) -> None:
        """Reset the network counters and start both background threads."""
        if self.is_running:
            return

        self._state = NetworkRateState()
        self._stop_event.clear()
        self._ticker = threading.Thread(
            target=self._tick_loop,
            daemon=True,
            name="PollLoop-ticker",
        )
        self._ticker.start()

        if self._quit_waiter is None or not self._quit_waiter.is_alive():
            self._quit_waiter = threading.Thread(
                target=self._wait_for_quit,
                daemon=True,
                name="PollLoop-quit",
            )
            self._quit_waiter.start()
        logger.info("Poll loop started, interval %.1fs", self._interval)

    def stop(self, timeout: float | None = 5.0) -> None:
        """
        Stop the ticker thread.

        A cycle that is already sampling is not interrupted.

        Args:
            timeout: How long to wait for the ticker to finish (seconds).
        """
        self._stop_event.set()
        if self._ticker is not None:
            self._ticker.join(timeout=timeout)
            self._ticker = None

    def run_cycle(self) -> bool:
        """
        Sample once and update every display slot.

        Returns:
            False if a metric query failed and nothing was updated.
        """
        try:
            strings, self._state = self._sampler.sample_and_format(self._state)
        except MetricQueryError as exc:
            logger.error("Error getting %s: %s", exc.metric, exc.cause)
            return False

        for slot, text in strings.items():
            self._shell.set_display_text(slot, text)
        return True

    def _tick_loop(self) -> None:
        """Main loop running in the ticker thread."""
        while not self._stop_event.wait(timeout=self._interval):
            try:
                self.run_cycle()
            except Exception:
                logger.exception("Unexpected error during sampling cycle")

    def _wait_for_quit(self) -> None:
        """Block until the user asks to quit, then terminate the shell."""
        self._shell.quit_requested.wait()
        logger.info("Quit requested")
        self._shell.request_terminate()
