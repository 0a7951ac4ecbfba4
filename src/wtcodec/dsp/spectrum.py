import numpy as np
from numpy.typing import NDArray

from wtcodec.types import MagnitudeSpectrum


def band_edges(lo_bin: int, hi_bin: int, bands: int) -> list[int]:
    """Split [lo_bin, hi_bin) into ``bands`` contiguous ranges.

    Edge ``b`` is ``lo_bin + floor(b * (hi_bin - lo_bin) / bands)`` for
    ``b = 0..bands``, so the last edge is always ``hi_bin``. Inputs are clamped
    so that ``0 <= lo_bin <= hi_bin``.

    Args:
        lo_bin: First bin covered by the bands.
        hi_bin: One past the last bin covered by the bands.
        bands: Number of bands (treated as at least 1).

    Returns:
        List of ``bands + 1`` non-decreasing bin indices.
    """
    bands = max(1, bands)
    lo_bin = max(0, lo_bin)
    hi_bin = max(lo_bin, hi_bin)
    total = hi_bin - lo_bin
    return [lo_bin + (b * total) // bands for b in range(bands + 1)]


def default_band_range(table_size: int, harmonics: int) -> tuple[int, int]:
    """Noise bands start just above the last harmonic and run through Nyquist."""
    half = table_size // 2
    return min(harmonics + 1, half), half + 1


def assemble_spectrum(
    table_size: int,
    harmonics: NDArray[np.floating],
    noise: NDArray[np.floating],
    lo_bin: int | None = None,
    hi_bin: int | None = None,
) -> MagnitudeSpectrum:
    """Build the magnitude half-spectrum of one frame.

    Harmonic ``h`` occupies bin ``1 + h``; harmonics beyond Nyquist are
    discarded. Noise band ``b`` sets every bin in ``[e_b, e_{b+1})`` to its
    level, overwriting any harmonic there. DC and Nyquist are forced to zero.

    Args:
        table_size: Frame length N (power of two).
        harmonics: Dequantized harmonic amplitudes, length H.
        noise: Dequantized noise-band levels, length B.
        lo_bin: First noise bin; defaults to ``min(H + 1, N / 2)``.
        hi_bin: One past the last noise bin; defaults to ``N / 2 + 1``.

    Returns:
        Float32 array of length ``N / 2 + 1``.
    """
    half = table_size // 2
    magnitudes = np.zeros(half + 1, dtype=np.float32)

    count = min(len(harmonics), half)
    if count > 0:
        magnitudes[1 : 1 + count] = harmonics[:count]

    bands = len(noise)
    if bands > 0:
        default_lo, default_hi = default_band_range(table_size, len(harmonics))
        edges = band_edges(
            default_lo if lo_bin is None else lo_bin,
            default_hi if hi_bin is None else hi_bin,
            bands,
        )
        for b in range(bands):
            start = min(edges[b], half + 1)
            end = min(edges[b + 1], half + 1)
            if start < end:
                magnitudes[start:end] = noise[b]

    magnitudes[0] = 0.0
    magnitudes[half] = 0.0
    return magnitudes
