"""gouge - System tray shell."""

import io
import logging
import threading
from collections.abc import Callable

import pystray
from PIL import Image
from pystray import Menu
from pystray import MenuItem as item

from gouge.config import APP_NAME, REFRESH_INTERVAL
from gouge.icon import IconNotFoundError, find_icon, placeholder_icon
from gouge.logs import cleanup, setup_logging
from gouge.models import MenuSlot
from gouge.monitor import PollLoop
from gouge.sampler import MetricsSampler

logger = logging.getLogger(__name__)


class TrayShell:
    """
    Tray icon with one menu item per metric and a Terminate entry.

    The metric items are read-only; their texts are set from the poll loop's
    ticker thread and picked up by pystray through callable item texts.
    """

    def __init__(
        self,
        sampler: MetricsSampler | None = None,
        interval: float = REFRESH_INTERVAL,
    ) -> None:
        self.quit_requested = threading.Event()
        self._texts: dict[MenuSlot, str] = {slot: slot.placeholder for slot in MenuSlot}
        self._poll_loop = PollLoop(self, sampler, interval)
        self._icon = pystray.Icon(APP_NAME, placeholder_icon(), APP_NAME, self._make_menu())

    @property
    def poll_loop(self) -> PollLoop:
        """Get the poll loop feeding this shell."""
        return self._poll_loop

    def display_text(self, slot: MenuSlot) -> str:
        """Get the text currently shown for a slot."""
        return self._texts[slot]

    def _slot_text(self, slot: MenuSlot) -> Callable[[item], str]:
        # pystray passes the menu item to callable texts
        return lambda _: self._texts[slot]

    def _make_menu(self) -> Menu:
        metric_items = [item(self._slot_text(slot), self._ignore) for slot in MenuSlot]
        return Menu(
            *metric_items,
            Menu.SEPARATOR,
            item("Terminate", self._on_quit),
        )

    def _ignore(self, icon=None, item_=None) -> None:
        pass

    def _on_quit(self, icon=None, item_=None) -> None:
        self.quit_requested.set()

    def set_display_text(self, slot: MenuSlot, text: str) -> None:
        """Replace the text of one metric item."""
        self._texts[slot] = text
        self._icon.update_menu()

    def set_icon(self, data: bytes) -> None:
        """Use an encoded image (PNG, ICNS, ...) as the tray icon."""
        self._icon.icon = Image.open(io.BytesIO(data))

    def set_tooltip(self, text: str) -> None:
        """Set the text shown when hovering the tray icon."""
        self._icon.title = text

    def request_terminate(self) -> None:
        """Stop the tray main loop, unwinding run()."""
        self._icon.stop()

    def load_icon(self) -> bool:
        """
        Replace the placeholder with the icon file, if one can be found.

        Returns:
            True if an icon file was applied.
        """
        try:
            data = find_icon()
        except IconNotFoundError as exc:
            logger.warning("Error loading icon: %s", exc)
            return False

        if not data:
            logger.warning("Icon is empty")
            return False

        try:
            self.set_icon(data)
        except (OSError, ValueError) as exc:
            logger.warning("Error decoding icon: %s", exc)
            return False
        logger.info("Setting icon, size: %d bytes", len(data))
        return True

    def _on_ready(self, icon: pystray.Icon) -> None:
        """Called by pystray once the tray is up."""
        icon.visible = True
        self.load_icon()
        self.set_tooltip(APP_NAME)
        self._poll_loop.start()

    def run(self) -> None:
        """Show the tray icon and block until terminated."""
        self._icon.run(setup=self._on_ready)
        self._poll_loop.stop(timeout=0)


def main() -> None:
    """Entry point for the gouge tray application."""
    handler = setup_logging()
    try:
        TrayShell().run()
    finally:
        cleanup(handler)


if __name__ == "__main__":
    main()
