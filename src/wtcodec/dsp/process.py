import numpy as np
from numpy.typing import NDArray


def dc_remove(frames: NDArray[np.floating]) -> NDArray[np.floating]:
    """Remove the DC component of every frame by subtracting its mean.

    Args:
        frames: Array of shape (num_frames, frame_length), or a single 1-D frame

    Returns:
        Array of the same shape and dtype with zero-mean rows
    """
    # Accumulate the mean in float64 so float32 tables stay within 1e-5 of zero mean.
    means = np.mean(frames, axis=-1, keepdims=True, dtype=np.float64)
    return (frames - means).astype(frames.dtype)


def normalize(
    frames: NDArray[np.floating],
    peak: float = 0.999,
    threshold: float = 1e-6,
) -> NDArray[np.floating]:
    """Scale all frames by a single gain so the global peak equals ``peak``.

    Args:
        frames: Array of any shape containing audio samples
        peak: Target peak amplitude (default: 0.999 to avoid clipping)
        threshold: Signals whose peak does not exceed this are returned unchanged

    Returns:
        Normalized array with the same shape and dtype
    """
    if frames.size == 0:
        return frames
    max_amplitude = float(np.max(np.abs(frames)))
    if max_amplitude <= threshold:
        return frames
    gain = peak / max_amplitude
    return (frames * gain).astype(frames.dtype)
