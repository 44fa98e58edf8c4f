"""
Scan session sequencing.

    Idle --ingest--> Ready --start--> Scanning --decode--> Resolved
                       ^                 |                    |
                       +-----cancel------+                    |
                                         ^----acknowledge-----+

reset returns to Idle from anywhere and clears the registry. The scan
capability is released on every way out of Scanning.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from checkin.core.exceptions import CapabilityUnavailable, SessionStateError
from checkin.core.messages import ACTIVATION_FAILURE_MESSAGE, DOCUMENT_MATCHING_NOTICE
from checkin.models.scan import ScanOutcome, SessionState
from checkin.services.matching import ScanMatchingService, scan_matching_service
from checkin.services.normalizer import SourceKind, coerce_source_kind, normalize
from checkin.services.registry import AttendeeRegistry
from checkin.services.scanner import ScanCapability
from checkin.utils.image import decode_qr_image

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngestResult:
    source_kind: SourceKind
    total_loaded: int
    advisory: Optional[str] = None


class ScanSessionController:
    def __init__(
        self,
        capability: ScanCapability,
        registry: Optional[AttendeeRegistry] = None,
        matcher: Optional[ScanMatchingService] = None,
        image_decoder: Callable[[bytes], str] = decode_qr_image,
    ):
        self.capability = capability
        self.registry = registry if registry is not None else AttendeeRegistry()
        self.matcher = matcher or scan_matching_service
        self.image_decoder = image_decoder
        self._state = SessionState.IDLE
        self._outcome: Optional[ScanOutcome] = None
        self._pending: Optional[asyncio.Task] = None
        self._generation = 0
        self._device_lock = asyncio.Lock()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def outcome(self) -> Optional[ScanOutcome]:
        return self._outcome

    def _transition(self, new_state: SessionState):
        if new_state is not self._state:
            logger.info(f"Session {self._state.value} -> {new_state.value}")
        self._state = new_state

    def ingest(self, source_kind: Union[SourceKind, str], raw_input: Any) -> IngestResult:
        """
        Replace the registry with a freshly normalized list.
        On any ingestion error the previous registry stays in place.
        """
        kind = coerce_source_kind(source_kind)
        records = normalize(kind, raw_input)
        self.registry.replace(records)

        if self._state is SessionState.IDLE:
            self._transition(SessionState.READY)

        advisory = DOCUMENT_MATCHING_NOTICE if kind is SourceKind.DOCUMENT else None
        return IngestResult(source_kind=kind, total_loaded=len(records), advisory=advisory)

    async def start(self):
        """Activate the scanner; a no-op while a scan is already pending"""
        if self._state is SessionState.SCANNING:
            logger.debug("Scan already in progress, ignoring start request")
            return
        if self._state is not SessionState.READY:
            raise SessionStateError(f"Cannot start scanning while {self._state.value}")
        await self._activate()

    async def acknowledge(self):
        """Operator moved on ("next guest" / "re-scan"): scan again right away"""
        if self._state is not SessionState.RESOLVED:
            raise SessionStateError(f"Nothing to acknowledge while {self._state.value}")
        self._pending = None
        await self._activate()

    async def cancel(self):
        if self._state is not SessionState.SCANNING:
            raise SessionStateError(f"No scan in progress (session is {self._state.value})")
        self._transition(SessionState.READY)
        await self._cancel_pending()

    async def reset(self):
        """Drop the guest list and go back to Idle"""
        self._transition(SessionState.IDLE)
        self._outcome = None
        await self._cancel_pending()
        self.registry.reset()

    async def wait_for_outcome(self) -> ScanOutcome:
        """Wait for the pending scan to resolve"""
        if self._state is SessionState.RESOLVED and self._outcome is not None:
            return self._outcome
        task = self._pending
        if task is None:
            raise SessionStateError("No scan in progress")
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            if not task.cancelled():
                raise
            raise SessionStateError("Scan was cancelled")

    async def submit_image(self, image_bytes: bytes) -> ScanOutcome:
        """
        Resolve a QR code from an uploaded image.
        DecodeFailure propagates and leaves the session where it was.
        """
        if self._state not in (SessionState.READY, SessionState.SCANNING):
            raise SessionStateError(f"Cannot scan an image while {self._state.value}")

        payload = self.image_decoder(image_bytes)

        if self._state is SessionState.SCANNING:
            self._transition(SessionState.READY)
            await self._cancel_pending()

        outcome = self.matcher.resolve(payload, self.registry)
        self._settle(outcome)
        return outcome

    async def _activate(self):
        # Scanning is claimed before acquisition so a concurrent start is a no-op
        self._outcome = None
        self._transition(SessionState.SCANNING)
        self._generation += 1
        generation = self._generation

        # One acquisition at a time; a superseded one releases before the next starts
        async with self._device_lock:
            if generation != self._generation:
                return
            try:
                await self.capability.acquire()
            except Exception as e:
                logger.error(f"Error starting scanner: {str(e)}")
                if generation == self._generation:
                    self._transition(SessionState.READY)
                raise CapabilityUnavailable(ACTIVATION_FAILURE_MESSAGE) from e

            if generation != self._generation:
                # Cancelled or reset while the device was starting up
                await self._release()
                return

            self._pending = asyncio.ensure_future(self._await_decode())
            self._pending.add_done_callback(self._on_pending_done)

    async def _await_decode(self) -> ScanOutcome:
        try:
            payload = await self.capability.next_decode()
            outcome = self.matcher.resolve(payload, self.registry)
        except Exception as e:
            logger.error(f"Scan failed: {str(e)}", exc_info=True)
            self._transition(SessionState.READY)
            raise CapabilityUnavailable(ACTIVATION_FAILURE_MESSAGE) from e
        finally:
            await self._release()

        self._settle(outcome)
        return outcome

    def _settle(self, outcome: ScanOutcome):
        self._outcome = outcome
        self._transition(SessionState.RESOLVED)

    def _on_pending_done(self, task: asyncio.Task):
        if task.cancelled() or task.exception() is None:
            return
        if self._pending is task:
            self._pending = None

    async def _cancel_pending(self):
        """Abandon the current activation, whether still acquiring or decoding"""
        self._generation += 1
        task, self._pending = self._pending, None
        if task is None or task.done():
            return
        task.cancel()
        await asyncio.wait([task])

    async def _release(self):
        try:
            await self.capability.release()
        except Exception as e:
            logger.error(f"Failed to stop scanner: {str(e)}")
