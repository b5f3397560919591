"""Fixed settings for gouge."""

APP_NAME = "GOuge"

# Seconds between sampling cycles
REFRESH_INTERVAL = 2.0

# Blocking window for the aggregate CPU percent measurement
CPU_SAMPLE_WINDOW = 1.0

# Divisor used for network rates; assumed, not measured
RATE_INTERVAL = 2

DISK_PATH = "/"

LOG_FILE = "gouge.log"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

ICON_NAMES = ("gouge.png", "gouge.icns")
ICON_DIRS = (".", "Resources", "../Resources")

# How often the terminal panel drains pending display updates
UI_DRAIN_INTERVAL = 0.5
