import asyncio
import logging
from typing import Optional, Protocol

from checkin.core.exceptions import CapabilityUnavailable, SessionStateError

logger = logging.getLogger(__name__)

class ScanCapability(Protocol):
    """
    External QR scanning device.
    Once acquired it yields exactly one decoded payload, then is released.
    """

    async def acquire(self) -> None:
        ...

    async def next_decode(self) -> str:
        ...

    async def release(self) -> None:
        ...

class PushScanCapability:
    """
    Scanner whose frames are decoded on the operator's device.
    The device pushes each decoded payload; acquire arms a single slot for it.
    """

    def __init__(self):
        self._pending: Optional[asyncio.Future] = None

    @property
    def armed(self) -> bool:
        return self._pending is not None and not self._pending.done()

    async def acquire(self) -> None:
        if self.armed:
            raise CapabilityUnavailable("Scanner is already in use")
        self._pending = asyncio.get_running_loop().create_future()
        logger.info("Scanner armed, waiting for a decoded payload")

    async def next_decode(self) -> str:
        if self._pending is None:
            raise CapabilityUnavailable("Scanner has not been activated")
        return await self._pending

    def push(self, payload: str):
        """Deliver a payload decoded on the scanning device"""
        if not self.armed:
            raise SessionStateError("Scanner is not active")
        self._pending.set_result(payload)

    async def release(self) -> None:
        pending, self._pending = self._pending, None
        if pending is not None and not pending.done():
            pending.cancel()
        logger.info("Scanner released")
