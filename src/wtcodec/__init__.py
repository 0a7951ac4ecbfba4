"""wtcodec - wtgen-1 spectral wavetable decoder.

This package decodes wtgen-1 documents, which carry a compact spectral
representation of a multi-frame wavetable (harmonic amplitudes plus banded
noise energies in an HNFPv1 framepack), into time-domain single-cycle frames
by minimum-phase reconstruction, and keeps up to four decoded wavetables in
slots that realtime readers can snapshot without blocking on decode work.

Example Usage
-------------
>>> from wtcodec import WavetableBank
>>> bank = WavetableBank()
>>> result = bank.load_file(0, "pad.wtgen.json")
>>> if not result:
...     print(result.kind, result.message)
>>> slots = bank.snapshot_slots()
>>> if slots[0] is not None:
...     print(slots[0].name, slots[0].num_frames, slots[0].table_size)
"""

from wtcodec.bank import LoadResult, WavetableBank
from wtcodec.config import HarmonicQuantization, LoaderConfig, NoiseQuantization
from wtcodec.errors import (
    BadEncodingError,
    BadHeaderError,
    BadMagicError,
    CodecError,
    DocumentIOError,
    ErrorKind,
    NumericalError,
    SchemaError,
    SchemaMismatchError,
    TooLargeError,
    TruncatedError,
)
from wtcodec.loader import decode_document, read_document
from wtcodec.registry import NUM_SLOTS, SlotEntry, SlotRegistry
from wtcodec.types import Wavetable
from wtcodec.validation import ValidationResult, validate_wavetable

__all__ = [
    # Types
    "Wavetable",
    "LoaderConfig",
    "HarmonicQuantization",
    "NoiseQuantization",
    # Loading
    "decode_document",
    "read_document",
    # Slots
    "WavetableBank",
    "LoadResult",
    "SlotRegistry",
    "SlotEntry",
    "NUM_SLOTS",
    # Validation
    "validate_wavetable",
    "ValidationResult",
    # Errors
    "ErrorKind",
    "CodecError",
    "DocumentIOError",
    "SchemaError",
    "BadEncodingError",
    "BadMagicError",
    "BadHeaderError",
    "SchemaMismatchError",
    "TruncatedError",
    "TooLargeError",
    "NumericalError",
]
