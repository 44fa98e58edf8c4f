"""Pytest configuration for the check-in test suite."""

import asyncio
import os

import pytest


def _ensure_test_env() -> None:
    """Seed environment variables before settings are loaded."""
    os.environ.setdefault("LOG_FILE", "")
    os.environ.setdefault("LOG_LEVEL", "DEBUG")


_ensure_test_env()

from checkin.core.exceptions import CapabilityUnavailable  # noqa: E402
from checkin.services.registry import AttendeeRegistry  # noqa: E402
from checkin.services.session import ScanSessionController  # noqa: E402


class FakeCapability:
    """Scan capability stub that yields queued payloads or waits forever."""

    def __init__(self, payloads=None, fail_acquire=False, decode_error=None):
        self.payloads = list(payloads or [])
        self.fail_acquire = fail_acquire
        self.decode_error = decode_error
        self.acquire_calls = 0
        self.release_calls = 0
        self.active = False

    async def acquire(self) -> None:
        self.acquire_calls += 1
        if self.fail_acquire:
            raise CapabilityUnavailable("Permission denied")
        self.active = True

    async def next_decode(self) -> str:
        if self.decode_error is not None:
            raise self.decode_error
        if self.payloads:
            return self.payloads.pop(0)
        await asyncio.Event().wait()
        return ""

    async def release(self) -> None:
        self.release_calls += 1
        self.active = False


class GatedCapability(FakeCapability):
    """Capability whose acquire blocks until the test opens the gate."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.gate = asyncio.Event()

    async def acquire(self) -> None:
        await self.gate.wait()
        await super().acquire()


def live_decode_tasks():
    return [
        task
        for task in asyncio.all_tasks()
        if not task.done() and task.get_coro().__qualname__.endswith("._await_decode")
    ]


SCENARIO_A_CSV = "registration_id,display_name\nA100,Alice\nA101,Bob"


@pytest.fixture
def registry() -> AttendeeRegistry:
    return AttendeeRegistry()


@pytest.fixture
def capability() -> FakeCapability:
    return FakeCapability()


@pytest.fixture
def controller(capability, registry) -> ScanSessionController:
    return ScanSessionController(
        capability=capability,
        registry=registry,
        image_decoder=lambda image_bytes: image_bytes.decode("utf-8"),
    )
