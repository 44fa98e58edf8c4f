import logging
from typing import Iterable, Iterator, Tuple

from checkin.models.attendee import AttendeeRecord

logger = logging.getLogger(__name__)

class AttendeeRegistry:
    """
    In-memory guest list for the current session.
    The record tuple is swapped whole on replace, never mutated in place,
    so a reader never observes a half-loaded list.
    """

    def __init__(self):
        self._records: Tuple[AttendeeRecord, ...] = ()

    @property
    def records(self) -> Tuple[AttendeeRecord, ...]:
        return self._records

    @property
    def size(self) -> int:
        return len(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[AttendeeRecord]:
        return iter(self._records)

    def replace(self, records: Iterable[AttendeeRecord]):
        """Install a freshly ingested list, discarding the previous one"""
        self._records = tuple(dict(record) for record in records)
        logger.info(f"Registry replaced: {len(self._records)} attendees loaded")

    def reset(self):
        self._records = ()
        logger.info("Registry cleared")
