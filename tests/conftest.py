"""Shared fixtures for gouge tests."""

import os
import threading

# The tray shell is exercised without a desktop session
os.environ.setdefault("PYSTRAY_BACKEND", "dummy")

import pytest  # noqa: E402

from gouge.models import MenuSlot  # noqa: E402


class FakeProvider:
    """MetricsProvider returning fixed values, optionally failing one metric."""

    def __init__(
        self,
        cpu: float = 42.37,
        ram: float = 55.0,
        disk: float = 71.24,
        uptime: int = 90125,
        counters: tuple[int, int] = (1048576, 2097152),
        fail: str | None = None,
    ) -> None:
        self.cpu = cpu
        self.ram = ram
        self.disk = disk
        self.uptime = uptime
        self.counters = counters
        self.fail = fail
        self.calls: list[str] = []

    def _check(self, metric: str) -> None:
        self.calls.append(metric)
        if self.fail == metric:
            raise OSError(f"{metric} unavailable")

    def cpu_percent(self, window: float) -> float:
        self._check("cpu")
        return self.cpu

    def virtual_memory_percent(self) -> float:
        self._check("memory")
        return self.ram

    def disk_usage_percent(self, path: str) -> float:
        self._check("disk")
        return self.disk

    def uptime_seconds(self) -> int:
        self._check("uptime")
        return self.uptime

    def network_counters(self) -> tuple[int, int]:
        self._check("network")
        return self.counters


class FakeShell:
    """DisplayShell that records texts and termination requests."""

    def __init__(self) -> None:
        self.quit_requested = threading.Event()
        self.terminated = threading.Event()
        self.texts: dict[MenuSlot, str] = {slot: slot.placeholder for slot in MenuSlot}
        self.updates = 0

    def set_display_text(self, slot: MenuSlot, text: str) -> None:
        self.texts[slot] = text
        self.updates += 1

    def request_terminate(self) -> None:
        self.terminated.set()


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def shell() -> FakeShell:
    return FakeShell()
