"""gouge - Terminal status panel (Textual)."""

import threading
from queue import Empty, Queue

from textual.app import App, ComposeResult
from textual.containers import Vertical
from textual.widgets import Footer, Static

from gouge.config import APP_NAME, REFRESH_INTERVAL, UI_DRAIN_INTERVAL
from gouge.logs import cleanup, setup_logging
from gouge.models import MenuSlot
from gouge.monitor import PollLoop
from gouge.sampler import MetricsSampler


class MetricLine(Static):
    """A single metric text, the terminal counterpart of a tray menu item."""

    DEFAULT_CSS = """
    MetricLine {
        height: 1;
        padding: 0 1;
    }
    """


class GougeApp(App):
    """
    Shows the five metric texts in the terminal.

    The poll loop writes from its ticker thread, so updates are queued and
    applied on the UI loop by a timer.
    """

    TITLE = APP_NAME
    SUB_TITLE = "System Metrics"

    CSS = """
    Screen {
        layout: vertical;
    }

    #metrics {
        height: auto;
        border: solid $primary;
        background: $surface;
    }
    """

    BINDINGS = [
        ("q", "quit", "Terminate"),
    ]

    def __init__(
        self,
        sampler: MetricsSampler | None = None,
        interval: float = REFRESH_INTERVAL,
    ) -> None:
        """Initialize the GougeApp."""
        super().__init__()
        self.quit_requested = threading.Event()
        # None asks the UI loop to exit
        self._update_queue: Queue[tuple[MenuSlot, str] | None] = Queue()
        self._texts: dict[MenuSlot, str] = {slot: slot.placeholder for slot in MenuSlot}
        self._poll_loop = PollLoop(self, sampler, interval)

    @property
    def poll_loop(self) -> PollLoop:
        """Get the poll loop feeding this app."""
        return self._poll_loop

    def display_text(self, slot: MenuSlot) -> str:
        """Get the text currently shown for a slot."""
        return self._texts[slot]

    def compose(self) -> ComposeResult:
        """Compose the metric panel."""
        with Vertical(id="metrics"):
            for slot in MenuSlot:
                line = MetricLine(slot.placeholder, id=slot.value)
                line.tooltip = slot.description
                yield line
        yield Footer()

    def on_mount(self) -> None:
        """Start sampling once the UI is ready."""
        self._poll_loop.start()
        self.set_interval(UI_DRAIN_INTERVAL, self._check_for_updates)

    def on_unmount(self) -> None:
        """Stop sampling when the app shuts down."""
        self._poll_loop.stop(timeout=0)

    def set_display_text(self, slot: MenuSlot, text: str) -> None:
        """Queue a new text for a slot. Safe to call from any thread."""
        self._update_queue.put((slot, text))

    def request_terminate(self) -> None:
        """Ask the UI loop to exit. Safe to call from any thread."""
        self._update_queue.put(None)

    def _check_for_updates(self) -> None:
        """Apply queued texts, or exit if termination was requested."""
        while True:
            try:
                update = self._update_queue.get_nowait()
            except Empty:
                break

            if update is None:
                self.exit()
                return

            slot, text = update
            self._texts[slot] = text
            self.query_one(f"#{slot.value}", MetricLine).update(text)

    def action_quit(self) -> None:
        """Handle quit action by signalling the poll loop's quit waiter."""
        self.quit_requested.set()


def main() -> None:
    """Entry point for the gouge terminal panel."""
    handler = setup_logging()
    try:
        GougeApp().run()
    finally:
        cleanup(handler)


if __name__ == "__main__":
    main()
