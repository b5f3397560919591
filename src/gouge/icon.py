"""Tray icon lookup for gouge."""

import logging
import sys
from pathlib import Path

from PIL import Image, ImageDraw

from gouge.config import ICON_DIRS, ICON_NAMES

logger = logging.getLogger(__name__)


class IconNotFoundError(FileNotFoundError):
    """Raised when no icon file could be read."""


def executable_dir() -> Path:
    """Directory of the running program (the bundle when frozen)."""
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(sys.argv[0]).resolve().parent


def icon_search_paths(exec_dir: Path | None = None) -> list[Path]:
    """
    List candidate icon files in probing order.

    Paths relative to the working directory come first, followed by the
    same layout under the executable's directory.
    """
    relative = [Path(folder) / name for name in ICON_NAMES for folder in ICON_DIRS]
    base = exec_dir if exec_dir is not None else executable_dir()
    return relative + [base / path for path in relative]


def find_icon(paths: list[Path] | None = None) -> bytes:
    """
    Read the first icon file that exists.

    Raises:
        IconNotFoundError: If none of the candidates can be read.
    """
    for path in paths if paths is not None else icon_search_paths():
        logger.debug("Trying to load icon from: %s", path)
        try:
            data = path.read_bytes()
        except OSError as exc:
            logger.debug("Failed to load icon from %s: %s", path, exc)
            continue
        logger.info("Icon found at: %s, size: %d bytes", path, len(data))
        return data

    raise IconNotFoundError("icon file not found in any of the expected locations")


def placeholder_icon(size: int = 64) -> Image.Image:
    """Draw a simple gauge used when no icon file is available."""
    img = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    d = ImageDraw.Draw(img)
    pad = size // 10
    width = max(1, size // 16)
    d.ellipse((pad, pad, size - pad, size - pad), fill=(30, 30, 30), outline=(102, 204, 255), width=width)
    center = size // 2
    d.line((center, center, size - 2 * pad, 2 * pad), fill=(102, 204, 255), width=width)
    return img
