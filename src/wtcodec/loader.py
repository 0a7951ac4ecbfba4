"""Document-to-wavetable decoding pipeline.

Stages run in order and the first failure aborts the pipeline:

    parse document -> base64 decode -> framepack header -> per frame:
    (dequantize -> assemble spectrum -> minimum-phase) -> DC removal ->
    global peak normalization
"""

import logging
from pathlib import Path

import numpy as np

from wtcodec.config import LoaderConfig
from wtcodec.dsp.minphase import reconstruct_minimum_phase
from wtcodec.dsp.process import dc_remove, normalize
from wtcodec.dsp.spectrum import assemble_spectrum
from wtcodec.errors import DocumentIOError
from wtcodec.format.document import parse_document
from wtcodec.format.framepack import iter_frames, read_header
from wtcodec.format.reader import ByteReader
from wtcodec.types import DEFAULT_WAVETABLE_NAME, Wavetable

logger = logging.getLogger(__name__)


def decode_document(
    text: str | bytes,
    name: str = DEFAULT_WAVETABLE_NAME,
    config: LoaderConfig | None = None,
) -> Wavetable:
    """Decode a wtgen-1 document into a wavetable.

    Args:
        text: The document text.
        name: Display name for the wavetable.
        config: Loader configuration (defaults to ``LoaderConfig()``).

    Returns:
        The decoded, DC-free, peak-normalized wavetable.

    Raises:
        CodecError: The first failure of any stage (see ``wtcodec.errors``).
    """
    config = config or LoaderConfig()

    if not text or (isinstance(text, str) and not text.strip()):
        raise DocumentIOError("document is empty", stage="io")

    params, payload = parse_document(text, max_payload_bytes=config.max_payload_bytes)

    reader = ByteReader(payload, stage="framepack")
    header = read_header(reader, params, max_samples=config.max_table_samples)
    logger.debug(
        "framepack header: N=%d F=%d H=%d B=%d",
        header.table_size,
        header.frames,
        header.harmonics,
        header.noise_bands,
    )

    frames = np.empty((header.frames, header.table_size), dtype=np.float64)
    records = iter_frames(
        reader,
        header,
        params,
        harmonic_quantization=config.harmonic_quantization,
        noise_quantization=config.noise_quantization,
    )
    for index, record in enumerate(records):
        magnitudes = assemble_spectrum(
            header.table_size,
            record.harmonics,
            record.noise,
            lo_bin=params.lo_bin,
            hi_bin=params.hi_bin,
        )
        frames[index] = reconstruct_minimum_phase(
            magnitudes, residual_tolerance=config.residual_tolerance
        )

    frames = dc_remove(frames)
    frames = normalize(frames, peak=config.target_peak, threshold=config.silence_threshold)

    wavetable = Wavetable(samples=frames, name=name)
    logger.debug("decoded %r: %d frames x %d samples", wavetable.name, *frames.shape)
    return wavetable


def read_document(path: Path | str) -> str:
    """Read a document file as UTF-8 text.

    Raises:
        DocumentIOError: If the file is missing, unreadable, not UTF-8 or empty.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise DocumentIOError(f"file not found: {path}", stage="io") from e
    except UnicodeDecodeError as e:
        raise DocumentIOError(f"file is not UTF-8 text: {path}", stage="io") from e
    except OSError as e:
        raise DocumentIOError(f"cannot read file: {path} ({e})", stage="io") from e

    if not text.strip():
        raise DocumentIOError(f"file is empty: {path}", stage="io")
    return text
