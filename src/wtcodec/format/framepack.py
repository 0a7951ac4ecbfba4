"""HNFPv1 framepack decoder.

The framepack is a little-endian binary stream::

    +----------------------------------------+
    | magic "HNFPv1\\0"            (7 bytes)  |
    | tableSize N                  (uint16)  |
    | frames F                     (uint16)  |
    | harmonics per frame H        (uint16)  |
    | noise bands per frame B      (uint16)  |
    +----------------------------------------+
    | F frame records, each 2H + 2B + 6 bytes |
    |   H x uint16  harmonic amplitudes       |
    |   B x int16   noise-band levels         |
    |   3 x uint16  reserved (discarded)      |
    +----------------------------------------+

Frames are yielded lazily with their amplitudes already dequantized.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from wtcodec.config import HarmonicQuantization, NoiseQuantization
from wtcodec.errors import (
    BadHeaderError,
    BadMagicError,
    SchemaMismatchError,
    TooLargeError,
    TruncatedError,
)
from wtcodec.format.document import CodecParams
from wtcodec.format.reader import ByteReader

logger = logging.getLogger(__name__)

MAGIC = b"HNFPv1\x00"
HEADER_SIZE = len(MAGIC) + 4 * 2
RESERVED_WORDS = 3

_STAGE = "framepack"


@dataclass(frozen=True)
class FramepackHeader:
    table_size: int
    frames: int
    harmonics: int
    noise_bands: int

    @property
    def record_size(self) -> int:
        """Size in bytes of one frame record."""
        return 2 * self.harmonics + 2 * self.noise_bands + 2 * RESERVED_WORDS

    @property
    def expected_size(self) -> int:
        """Minimum stream size holding the header and every frame record."""
        return HEADER_SIZE + self.frames * self.record_size


@dataclass(frozen=True)
class FrameRecord:
    """One dequantized frame: harmonic amplitudes and noise-band levels."""

    harmonics: NDArray[np.float32]
    noise: NDArray[np.float32]


def _is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


def read_header(
    reader: ByteReader,
    params: CodecParams | None = None,
    max_samples: int | None = None,
) -> FramepackHeader:
    """Read and validate the framepack header.

    Args:
        reader: Reader positioned at the start of the framepack.
        params: Document parameters used to cross-check ``tableSize`` and
            ``frames`` when the document declares them.
        max_samples: Largest accepted ``frames * tableSize``; unbounded if None.

    Returns:
        The validated header. The reader is left at the first frame record.

    Raises:
        TruncatedError: If the stream is shorter than the header or than
            the frame records the header declares.
        BadMagicError: If the magic is not ``HNFPv1\\0``.
        BadHeaderError: If N is not a power of two >= 2 or F < 1.
        SchemaMismatchError: If the header contradicts the document hints.
        TooLargeError: If the decoded table would exceed ``max_samples``.
    """
    if reader.peek(len(MAGIC), "magic") != MAGIC:
        raise BadMagicError(
            f"invalid magic {reader.peek(len(MAGIC))!r} (expected {MAGIC!r})", stage=_STAGE
        )
    reader.read_bytes(len(MAGIC), "magic")

    header = FramepackHeader(
        table_size=reader.read_u16("header"),
        frames=reader.read_u16("header"),
        harmonics=reader.read_u16("header"),
        noise_bands=reader.read_u16("header"),
    )

    if header.table_size < 2 or not _is_power_of_two(header.table_size):
        raise BadHeaderError(
            f"tableSize must be a power of two >= 2, got {header.table_size}", stage=_STAGE
        )
    if header.frames < 1:
        raise BadHeaderError(f"frames must be >= 1, got {header.frames}", stage=_STAGE)

    if params is not None:
        _cross_check(header, params)

    samples = header.frames * header.table_size
    if max_samples is not None and samples > max_samples:
        raise TooLargeError(
            f"header declares {header.frames} frames of {header.table_size} samples "
            f"({samples} samples), limit is {max_samples}",
            stage=_STAGE,
        )

    available = reader.position + reader.remaining
    if available < header.expected_size:
        raise TruncatedError(
            f"truncated: header declares {header.frames} frames of {header.record_size} bytes "
            f"({header.expected_size} bytes total), stream has {available}",
            stage=_STAGE,
        )

    return header


def _cross_check(header: FramepackHeader, params: CodecParams) -> None:
    if params.table_size is not None and params.table_size != header.table_size:
        raise SchemaMismatchError(
            f"tableSize {header.table_size} does not match document tableSize {params.table_size}",
            stage=_STAGE,
        )
    if params.frames is not None and params.frames != header.frames:
        raise SchemaMismatchError(
            f"frames {header.frames} does not match document frames {params.frames}",
            stage=_STAGE,
        )

    if params.harmonic_count is not None and params.harmonic_count != header.harmonics:
        logger.warning(
            "document declares %d harmonics, framepack header has %d; using header",
            params.harmonic_count,
            header.harmonics,
        )
    if params.noise_bands is not None and params.noise_bands != header.noise_bands:
        logger.warning(
            "document declares %d noise bands, framepack header has %d; using header",
            params.noise_bands,
            header.noise_bands,
        )


def dequantize_harmonics(
    q: NDArray[np.uint16],
    table_size: int,
    amp_scale: float = 1.0,
    method: HarmonicQuantization = HarmonicQuantization.prescaled,
) -> NDArray[np.float32]:
    """Map quantized harmonic amplitudes to half-spectrum bin magnitudes.

    ``prescaled``: ``q / 4096 * N / 2 * amp_scale``.
    ``normalized``: ``q / 65535 * amp_scale``.
    """
    values = q.astype(np.float64)
    match method:
        case HarmonicQuantization.prescaled:
            amps = values / 4096.0 * (table_size / 2.0) * amp_scale
        case HarmonicQuantization.normalized:
            amps = values / 65535.0 * amp_scale
        case _:
            raise ValueError(f"Unknown harmonic quantization: {method}")
    return amps.astype(np.float32)


def dequantize_noise(
    q: NDArray[np.int16],
    table_size: int,
    db_range: float = 60.0,
    method: NoiseQuantization = NoiseQuantization.half_db,
) -> NDArray[np.float32]:
    """Map quantized noise-band levels to linear bin magnitudes.

    ``half_db``: ``db = q * 0.5``, ``level = 10^(db / 20) * N / 2``.
    ``linear_range``: ``norm = (q + 32768) / 65535``,
    ``db = -db_range + norm * db_range``, ``level = 10^(db / 20)``.
    """
    values = q.astype(np.float64)
    with np.errstate(over="ignore"):
        match method:
            case NoiseQuantization.half_db:
                levels = np.power(10.0, values * 0.5 / 20.0) * (table_size / 2.0)
            case NoiseQuantization.linear_range:
                norm = (values + 32768.0) / 65535.0
                db = -db_range + norm * db_range
                levels = np.power(10.0, db / 20.0)
            case _:
                raise ValueError(f"Unknown noise quantization: {method}")
        return levels.astype(np.float32)


def iter_frames(
    reader: ByteReader,
    header: FramepackHeader,
    params: CodecParams | None = None,
    harmonic_quantization: HarmonicQuantization = HarmonicQuantization.prescaled,
    noise_quantization: NoiseQuantization = NoiseQuantization.half_db,
) -> Iterator[FrameRecord]:
    """Lazily decode the frame records following the header.

    Args:
        reader: Reader positioned at the first frame record.
        header: The header returned by ``read_header``.
        params: Document parameters supplying ``ampScale`` and ``dbRange``.
        harmonic_quantization: Harmonic dequantization variant.
        noise_quantization: Noise-band dequantization variant.

    Yields:
        One ``FrameRecord`` per frame, in stream order.

    Raises:
        TruncatedError: If the stream ends inside a record.
    """
    params = params or CodecParams()
    n = header.table_size

    for _ in range(header.frames):
        q_harmonics = reader.read_u16_array(header.harmonics, "harmonics")
        q_noise = reader.read_i16_array(header.noise_bands, "noise")
        # Reserved phase-lock/tilt words are consumed and ignored.
        for _ in range(RESERVED_WORDS):
            reader.read_u16("reserved")

        yield FrameRecord(
            harmonics=dequantize_harmonics(
                q_harmonics, n, params.amp_scale, harmonic_quantization
            ),
            noise=dequantize_noise(q_noise, n, params.noise_db_range, noise_quantization),
        )
