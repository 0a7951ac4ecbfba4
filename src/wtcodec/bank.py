"""Public operation surface: load documents into slots and read them back."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from wtcodec.config import LoaderConfig
from wtcodec.errors import CodecError, ErrorKind
from wtcodec.loader import decode_document, read_document
from wtcodec.registry import NUM_SLOTS, SlotRegistry
from wtcodec.types import Wavetable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadResult:
    """Outcome of a load: success, or the first error's kind and message."""

    ok: bool
    kind: ErrorKind | None = None
    message: str = ""

    @classmethod
    def success(cls) -> "LoadResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "LoadResult":
        return cls(ok=False, kind=kind, message=message)

    @classmethod
    def from_error(cls, error: CodecError) -> "LoadResult":
        return cls.failure(error.kind, str(error))

    def __bool__(self) -> bool:
        return self.ok


def state_keys(slot: int) -> tuple[str, str]:
    """Host-state keys (document, name) of a slot; keys are 1-based."""
    return f"wt_slot{slot + 1}_json", f"wt_slot{slot + 1}_name"


class WavetableBank:
    """Owns a slot registry and the configuration used to fill it.

    Each processor instance owns its own bank; banks never share slots.
    """

    def __init__(self, config: LoaderConfig | None = None) -> None:
        self.config = config or LoaderConfig()
        self.registry = SlotRegistry()

    def load_document(self, slot: int, text: str, name: str) -> LoadResult:
        """Decode ``text`` and install it in ``slot``.

        Decoding happens outside the registry lock. On failure the slot keeps
        its previous contents.

        Args:
            slot: Target slot, 0..3.
            text: wtgen-1 document text.
            name: Display name stored with the slot.

        Returns:
            ``LoadResult.success()`` or a failure naming the error kind and stage.
        """
        if not 0 <= slot < NUM_SLOTS:
            raise IndexError(f"slot must be in 0..{NUM_SLOTS - 1}, got {slot}")

        try:
            wavetable = decode_document(text, name=name, config=self.config)
        except CodecError as e:
            logger.debug("load into slot %d failed: %s", slot, e)
            return LoadResult.from_error(e)

        self.registry.install(slot, wavetable, text, wavetable.name)
        return LoadResult.success()

    def load_file(self, slot: int, path: Path | str) -> LoadResult:
        """Read a document file and load it, naming the slot after the file."""
        path = Path(path)
        try:
            text = read_document(path)
        except CodecError as e:
            return LoadResult.from_error(e)
        return self.load_document(slot, text, path.name)

    def clear_slot(self, slot: int) -> None:
        self.registry.clear(slot)

    def snapshot_slots(self) -> tuple[Wavetable | None, ...]:
        return self.registry.snapshot()

    def get_slot(self, slot: int) -> Wavetable | None:
        if not 0 <= slot < NUM_SLOTS:
            return None
        return self.registry.get(slot)

    def get_slot_name(self, slot: int) -> str:
        if not 0 <= slot < NUM_SLOTS:
            return ""
        return self.registry.get_name(slot)

    def get_slot_source(self, slot: int) -> str:
        if not 0 <= slot < NUM_SLOTS:
            return ""
        return self.registry.get_source(slot)

    def get_state(self) -> dict[str, str]:
        """Serialize each slot's document text and display name."""
        state: dict[str, str] = {}
        for slot, entry in enumerate(self.registry.entries()):
            json_key, name_key = state_keys(slot)
            state[json_key] = entry.source if entry else ""
            state[name_key] = entry.name if entry else ""
        return state

    def set_state(self, state: Mapping[str, str]) -> list[LoadResult]:
        """Rehydrate slots from ``get_state`` output.

        A slot whose document fails to load is left empty; the remaining
        slots are still restored.

        Returns:
            One result per slot; empty slots report success.
        """
        results = []
        for slot in range(NUM_SLOTS):
            json_key, name_key = state_keys(slot)
            text = state.get(json_key, "")
            if not text:
                self.registry.clear(slot)
                results.append(LoadResult.success())
                continue

            result = self.load_document(slot, text, state.get(name_key, ""))
            if not result:
                logger.warning("could not restore slot %d: %s", slot, result.message)
                self.registry.clear(slot)
            results.append(result)
        return results
