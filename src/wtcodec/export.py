from pathlib import Path
from typing import Any

import numpy as np
from scipy.io import wavfile

from wtcodec.types import Wavetable


def save_frames_as_wav(
    output_dir: Path | str,
    wavetable: Wavetable,
    sample_rate: int = 44100,
    bit_depth: int = 16,
) -> list[Path]:
    """
    Save each frame of a wavetable as an individual single-cycle .wav file.

    Args:
        output_dir: Directory to save .wav files
        wavetable: Decoded wavetable whose frames are written
        sample_rate: Sample rate for .wav files (default 44100 Hz)
        bit_depth: Bit depth for .wav files (16 or 24 or 32)

    Returns:
        Paths of the written files, in frame order
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    if bit_depth == 16:
        dtype: type[np.signedinteger[Any]] = np.int16
        scale = 32767.0
    elif bit_depth == 24:
        # scipy.wavfile doesn't support 24-bit directly, use 32-bit instead
        dtype = np.int32
        scale = 8388607.0
    elif bit_depth == 32:
        dtype = np.int32
        scale = 2147483647.0
    else:
        raise ValueError(f"Unsupported bit depth: {bit_depth}. Use 16, 24, or 32.")

    written = []
    for index, frame in enumerate(wavetable.samples):
        frame_clean = np.where(np.isfinite(frame), frame.astype(np.float64), 0.0)
        frame_scaled = (np.clip(frame_clean, -1.0, 1.0) * scale).astype(dtype)

        filepath = output_dir / f"frame_{index:03d}_len{wavetable.table_size}.wav"
        wavfile.write(str(filepath), sample_rate, frame_scaled)
        written.append(filepath)

    return written
