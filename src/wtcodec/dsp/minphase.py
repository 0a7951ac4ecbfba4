"""Minimum-phase reconstruction from a magnitude-only half-spectrum.

Uses the real-cepstrum method over a complex power-of-two FFT:

1. log|X| mirrored into a Hermitian length-N spectrum
2. inverse FFT to the real cepstrum
3. fold the cepstrum so it is causal (double positive quefrencies, zero negative)
4. forward FFT back to a complex log-spectrum, then exponentiate
5. inverse FFT to the time domain

All transforms run in single precision (complex64).
"""

import numpy as np
from numpy.typing import NDArray
from scipy import fft

from wtcodec.errors import NumericalError
from wtcodec.types import MagnitudeSpectrum

EPSILON = 1e-12

_STAGE = "minphase"


def _check_size(table_size: int) -> None:
    if table_size < 2 or table_size & (table_size - 1):
        raise ValueError(f"table size must be a power of two >= 2, got {table_size}")


def log_magnitude_spectrum(magnitudes: MagnitudeSpectrum) -> NDArray[np.complex64]:
    """Mirror a half-spectrum of log magnitudes into a full Hermitian spectrum.

    ``L[k] = log(max(M[min(k, N - k)], EPSILON))`` with zero imaginary part.
    """
    half = len(magnitudes) - 1
    table_size = 2 * half
    _check_size(table_size)

    floored = np.maximum(np.asarray(magnitudes, dtype=np.float32), np.float32(EPSILON))
    with np.errstate(over="ignore", invalid="ignore"):
        log_half = np.log(floored)

    k = np.arange(table_size)
    return log_half[np.minimum(k, table_size - k)].astype(np.complex64)


def real_cepstrum(log_spectrum: NDArray[np.complex64]) -> NDArray[np.complex64]:
    """Inverse FFT of the log spectrum, scaled by 1/N."""
    return fft.ifft(log_spectrum.astype(np.complex64)).astype(np.complex64)


def fold_cepstrum(cepstrum: NDArray[np.complexfloating]) -> NDArray[np.complex64]:
    """Make a real cepstrum causal.

    ``c[0]`` and ``c[N/2]`` are kept, ``c[1:N/2]`` is doubled and
    ``c[N/2+1:]`` is zeroed.
    """
    table_size = len(cepstrum)
    half = table_size // 2
    folded = np.array(cepstrum, dtype=np.complex64, copy=True)
    folded[1:half] *= 2.0
    folded[half + 1 :] = 0.0
    return folded


def minimum_phase_spectrum(folded: NDArray[np.complex64]) -> NDArray[np.complex64]:
    """Forward FFT of the folded cepstrum, exponentiated, with exact Hermitian symmetry."""
    table_size = len(folded)
    half = table_size // 2
    log_spectrum = fft.fft(folded).astype(np.complex64)

    with np.errstate(over="ignore", invalid="ignore"):
        spectrum = (
            np.exp(log_spectrum.real) * (np.cos(log_spectrum.imag) + 1j * np.sin(log_spectrum.imag))
        ).astype(np.complex64)

    spectrum[0] = spectrum[0].real
    spectrum[half] = spectrum[half].real
    spectrum[half + 1 :] = np.conj(spectrum[1:half][::-1])
    return spectrum


def imaginary_residual(signal: NDArray[np.complexfloating]) -> float:
    """Largest imaginary magnitude relative to the largest real magnitude."""
    real_peak = float(np.max(np.abs(signal.real)))
    imag_peak = float(np.max(np.abs(signal.imag)))
    if real_peak == 0.0:
        return 0.0 if imag_peak == 0.0 else float("inf")
    return imag_peak / real_peak


def reconstruct_minimum_phase(
    magnitudes: MagnitudeSpectrum,
    residual_tolerance: float = 1e-4,
) -> NDArray[np.float32]:
    """Reconstruct a real minimum-phase frame whose spectrum magnitude matches ``magnitudes``.

    Args:
        magnitudes: Half-spectrum of length ``N / 2 + 1`` with N a power of two.
        residual_tolerance: Largest accepted ratio of the imaginary residual
            to the real peak after the final inverse FFT.

    Returns:
        Float32 time-domain frame of length N.

    Raises:
        ValueError: If the spectrum length does not correspond to a power-of-two N.
        NumericalError: If the output contains non-finite samples or the
            imaginary residual exceeds ``residual_tolerance``.
    """
    log_spectrum = log_magnitude_spectrum(magnitudes)
    folded = fold_cepstrum(real_cepstrum(log_spectrum))
    spectrum = minimum_phase_spectrum(folded)
    signal = fft.ifft(spectrum).astype(np.complex64)

    if not np.all(np.isfinite(signal)):
        raise NumericalError("reconstruction produced non-finite samples", stage=_STAGE)

    residual = imaginary_residual(signal)
    if residual > residual_tolerance:
        raise NumericalError(
            f"imaginary residual {residual:.3g} exceeds tolerance {residual_tolerance:.3g}",
            stage=_STAGE,
        )

    return signal.real.astype(np.float32)
