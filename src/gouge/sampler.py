"""Metric sampling and formatting for gouge."""

import logging
import time
from collections.abc import Callable
from typing import Protocol, TypeVar

import psutil

from gouge.config import CPU_SAMPLE_WINDOW, DISK_PATH, RATE_INTERVAL
from gouge.models import DisplayStrings, MenuSlot, MetricSnapshot, NetworkRateState

logger = logging.getLogger(__name__)

T = TypeVar("T")

BYTES_PER_MB = 1024 * 1024

# Failures a single OS query may raise; anything else is a bug
QUERY_ERRORS = (psutil.Error, OSError, RuntimeError, NotImplementedError)


class MetricQueryError(Exception):
    """Raised when one of the OS metric queries fails."""

    def __init__(self, metric: str, cause: BaseException) -> None:
        super().__init__(f"{metric}: {cause}")
        self.metric = metric
        self.cause = cause


class MetricsProvider(Protocol):
    """Source of raw OS counters."""

    def cpu_percent(self, window: float) -> float: ...

    def virtual_memory_percent(self) -> float: ...

    def disk_usage_percent(self, path: str) -> float: ...

    def uptime_seconds(self) -> int: ...

    def network_counters(self) -> tuple[int, int]: ...


class PsutilProvider:
    """MetricsProvider backed by psutil."""

    def cpu_percent(self, window: float) -> float:
        # Blocks for `window` seconds to measure the interval average
        return psutil.cpu_percent(interval=window, percpu=False)

    def virtual_memory_percent(self) -> float:
        return psutil.virtual_memory().percent

    def disk_usage_percent(self, path: str) -> float:
        return psutil.disk_usage(path).percent

    def uptime_seconds(self) -> int:
        return max(0, int(time.time() - psutil.boot_time()))

    def network_counters(self) -> tuple[int, int]:
        """Return cumulative (bytes_sent, bytes_recv) across all interfaces."""
        counters = psutil.net_io_counters(pernic=False)
        if counters is None:
            raise RuntimeError("no network interfaces found")
        return counters.bytes_sent, counters.bytes_recv


def format_percent(value: float) -> str:
    """Format a percentage with one decimal digit, e.g. 42.37 -> '42.4%'."""
    return f"{value:.1f}%"


def format_uptime(seconds: int) -> str:
    """Format an uptime as 'D d, H h, M m'."""
    hours = seconds // 3600
    minutes = seconds // 60
    return f"{hours // 24} d, {hours % 24} h, {minutes % 60} m"


def compute_rates(
    state: NetworkRateState,
    bytes_sent: int,
    bytes_recv: int,
    interval: float = RATE_INTERVAL,
) -> tuple[float, float]:
    """
    Derive (sent, received) rates in MB/s from cumulative counters.

    The first cycle after a reset reports zero rates. The interval is the
    assumed sampling period, not the measured time between calls.
    """
    if state.is_cold:
        return 0.0, 0.0
    sent = (bytes_sent - state.prev_bytes_sent) / BYTES_PER_MB / interval
    recv = (bytes_recv - state.prev_bytes_recv) / BYTES_PER_MB / interval
    return sent, recv


def format_network_rate(sent_rate: float, recv_rate: float) -> str:
    """Format network rates, e.g. 'Sent: 1.00 MB/s, Received: 0.50 MB/s'."""
    return f"Sent: {sent_rate:.2f} MB/s, Received: {recv_rate:.2f} MB/s"


def _item_text(slot: MenuSlot, value: str) -> str:
    return f"{slot.label}: {value}"


def _query(metric: str, func: Callable[..., T], *args: object) -> T:
    try:
        return func(*args)
    except QUERY_ERRORS as exc:
        raise MetricQueryError(metric, exc) from exc


class MetricsSampler:
    """
    Turns OS counters into the five menu texts.

    Every query must succeed for a cycle to produce output: the first failing
    query raises MetricQueryError and nothing from that cycle is returned.
    """

    def __init__(
        self,
        provider: MetricsProvider | None = None,
        disk_path: str = DISK_PATH,
        cpu_window: float = CPU_SAMPLE_WINDOW,
        rate_interval: float = RATE_INTERVAL,
    ) -> None:
        """
        Initialize the MetricsSampler.

        Args:
            provider: Source of raw counters. Defaults to PsutilProvider.
            disk_path: Mount point whose usage is reported.
            cpu_window: Seconds the CPU measurement blocks for.
            rate_interval: Assumed seconds between cycles for network rates.
        """
        self._provider = provider if provider is not None else PsutilProvider()
        self._disk_path = disk_path
        self._cpu_window = cpu_window
        self._rate_interval = rate_interval

    def collect_snapshot(self) -> MetricSnapshot:
        """Query every metric once, in display order."""
        provider = self._provider
        cpu = _query("cpu", provider.cpu_percent, self._cpu_window)
        ram = _query("memory", provider.virtual_memory_percent)
        disk = _query("disk", provider.disk_usage_percent, self._disk_path)
        uptime = _query("uptime", provider.uptime_seconds)
        sent, recv = _query("network", provider.network_counters)

        return MetricSnapshot(
            cpu_percent=cpu,
            ram_used_percent=ram,
            disk_used_percent=disk,
            uptime_seconds=uptime,
            network_bytes_sent=sent,
            network_bytes_recv=recv,
        )

    def sample_and_format(
        self, state: NetworkRateState
    ) -> tuple[DisplayStrings, NetworkRateState]:
        """
        Run one sampling cycle.

        Args:
            state: Network counters from the previous cycle.

        Returns:
            The formatted menu texts and the state for the next cycle.

        Raises:
            MetricQueryError: If any OS query fails.
        """
        snapshot = self.collect_snapshot()

        sent_rate, recv_rate = compute_rates(
            state,
            snapshot.network_bytes_sent,
            snapshot.network_bytes_recv,
            self._rate_interval,
        )
        next_state = NetworkRateState(
            prev_bytes_sent=snapshot.network_bytes_sent,
            prev_bytes_recv=snapshot.network_bytes_recv,
        )

        strings = DisplayStrings(
            cpu=_item_text(MenuSlot.CPU, format_percent(snapshot.cpu_percent)),
            ram=_item_text(MenuSlot.RAM, format_percent(snapshot.ram_used_percent)),
            disk=_item_text(MenuSlot.DISK, format_percent(snapshot.disk_used_percent)),
            network=_item_text(MenuSlot.NETWORK, format_network_rate(sent_rate, recv_rate)),
            uptime=_item_text(MenuSlot.UPTIME, format_uptime(snapshot.uptime_seconds)),
        )
        logger.debug("Sampled %s", snapshot)
        return strings, next_state
