"""Four-slot wavetable registry with atomic publication.

Slots are held in an immutable tuple that is replaced wholesale under a
short lock. Readers copy the tuple reference under the same lock and never
touch the registry again while rendering; the wavetables behind it are
immutable, so a snapshot stays valid however the slots change afterwards.
"""

import logging
import threading
from dataclasses import dataclass

from wtcodec.types import Wavetable

logger = logging.getLogger(__name__)

NUM_SLOTS = 4


@dataclass(frozen=True)
class SlotEntry:
    wavetable: Wavetable
    source: str
    """The document text the wavetable was decoded from."""
    name: str


def _check_slot(slot: int) -> None:
    if not 0 <= slot < NUM_SLOTS:
        raise IndexError(f"slot must be in 0..{NUM_SLOTS - 1}, got {slot}")


class SlotRegistry:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: tuple[SlotEntry | None, ...] = (None,) * NUM_SLOTS

    def install(self, slot: int, wavetable: Wavetable, source: str, name: str) -> None:
        """Replace the contents of ``slot`` in a single step."""
        _check_slot(slot)
        entry = SlotEntry(wavetable=wavetable, source=source, name=name)
        with self._lock:
            entries = list(self._entries)
            entries[slot] = entry
            self._entries = tuple(entries)
        logger.info(
            "installed %r in slot %d (%d frames x %d samples)",
            name,
            slot,
            wavetable.num_frames,
            wavetable.table_size,
        )

    def clear(self, slot: int) -> None:
        """Return ``slot`` to the empty state."""
        _check_slot(slot)
        with self._lock:
            entries = list(self._entries)
            entries[slot] = None
            self._entries = tuple(entries)

    def entries(self) -> tuple[SlotEntry | None, ...]:
        """Consistent view of all four slot entries."""
        with self._lock:
            return self._entries

    def snapshot(self) -> tuple[Wavetable | None, ...]:
        """Wavetable handles of all four slots, taken atomically."""
        return tuple(entry.wavetable if entry else None for entry in self.entries())

    def entry(self, slot: int) -> SlotEntry | None:
        _check_slot(slot)
        with self._lock:
            return self._entries[slot]

    def get(self, slot: int) -> Wavetable | None:
        entry = self.entry(slot)
        return entry.wavetable if entry else None

    def get_name(self, slot: int) -> str:
        entry = self.entry(slot)
        return entry.name if entry else ""

    def get_source(self, slot: int) -> str:
        entry = self.entry(slot)
        return entry.source if entry else ""
