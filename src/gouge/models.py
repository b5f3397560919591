"""Data models for gouge."""

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum


class MenuSlot(Enum):
    """The five menu items the sampler writes into."""

    CPU = "cpu"
    RAM = "ram"
    DISK = "disk"
    NETWORK = "network"
    UPTIME = "uptime"

    @property
    def label(self) -> str:
        """Prefix shown in front of the metric value."""
        return _LABELS[self]

    @property
    def placeholder(self) -> str:
        """Text shown before the first successful cycle."""
        return f"{self.label}: -"

    @property
    def description(self) -> str:
        """Tooltip describing the metric."""
        return _DESCRIPTIONS[self]


_LABELS = {
    MenuSlot.CPU: "CPU",
    MenuSlot.RAM: "RAM",
    MenuSlot.DISK: "Disk",
    MenuSlot.NETWORK: "Network",
    MenuSlot.UPTIME: "Uptime",
}

_DESCRIPTIONS = {
    MenuSlot.CPU: "CPU Usage",
    MenuSlot.RAM: "RAM Usage",
    MenuSlot.DISK: "Disk Usage",
    MenuSlot.NETWORK: "Network Usage",
    MenuSlot.UPTIME: "System Uptime",
}


@dataclass(slots=True, frozen=True)
class MetricSnapshot:
    """Immutable snapshot of the host metrics for one cycle."""

    cpu_percent: float  # 0.0 - 100.0, averaged over all cores
    ram_used_percent: float
    disk_used_percent: float  # root filesystem
    uptime_seconds: int
    network_bytes_sent: int  # cumulative since boot
    network_bytes_recv: int


@dataclass(slots=True, frozen=True)
class NetworkRateState:
    """Network counters carried from one cycle to the next."""

    prev_bytes_sent: int = 0
    prev_bytes_recv: int = 0

    @property
    def is_cold(self) -> bool:
        """True when no rate can be derived from these counters."""
        return self.prev_bytes_sent == 0 or self.prev_bytes_recv == 0


@dataclass(slots=True, frozen=True)
class DisplayStrings:
    """Formatted menu texts produced by one sampling cycle."""

    cpu: str
    ram: str
    disk: str
    network: str
    uptime: str

    def items(self) -> Iterator[tuple[MenuSlot, str]]:
        """Yield (slot, text) pairs in menu order."""
        yield MenuSlot.CPU, self.cpu
        yield MenuSlot.RAM, self.ram
        yield MenuSlot.DISK, self.disk
        yield MenuSlot.NETWORK, self.network
        yield MenuSlot.UPTIME, self.uptime
