"""Invariant checks for decoded wavetables.

Errors are conditions a correctly decoded wavetable can never show; warnings
flag tables that are legal but probably not what the document author meant.
"""

from dataclasses import dataclass

import numpy as np

from wtcodec.types import Wavetable

MAX_FRAME_MEAN = 1e-5


@dataclass
class ValidationResult:
    """Result of validation with optional warnings."""

    valid: bool
    errors: list[str]
    warnings: list[str]

    @classmethod
    def success(cls, warnings: list[str] | None = None) -> "ValidationResult":
        """Create a successful validation result."""
        return cls(valid=True, errors=[], warnings=warnings or [])

    @classmethod
    def failure(cls, errors: list[str], warnings: list[str] | None = None) -> "ValidationResult":
        """Create a failed validation result."""
        return cls(valid=False, errors=errors, warnings=warnings or [])


def validate_wavetable(wavetable: Wavetable) -> ValidationResult:
    """Validate a decoded wavetable against the post-decode invariants.

    This checks:
    - table_size is a power of two >= 2
    - at least one frame
    - all samples finite
    - global peak <= 1.0
    - every frame mean within MAX_FRAME_MEAN of zero (warning)
    - the table is not entirely silent (warning)

    Args:
        wavetable: The wavetable to validate.

    Returns:
        ValidationResult with errors and warnings.
    """
    errors: list[str] = []
    warnings: list[str] = []

    if wavetable.table_size < 2 or not _is_power_of_two(wavetable.table_size):
        errors.append(f"table_size must be a power of 2 >= 2, got {wavetable.table_size}")

    if wavetable.num_frames < 1:
        errors.append("num_frames must be > 0")
        return ValidationResult.failure(errors, warnings)

    samples = wavetable.samples
    if not np.all(np.isfinite(samples)):
        nan_count = int(np.sum(np.isnan(samples)))
        inf_count = int(np.sum(np.isinf(samples)))
        errors.append(f"contains non-finite values ({nan_count} NaN, {inf_count} Inf)")
        return ValidationResult.failure(errors, warnings)

    peak = wavetable.peak
    if peak > 1.0:
        errors.append(f"samples exceed [-1, 1] range, max |sample| = {peak:.4f}")
    elif peak == 0.0:
        warnings.append("all frames are silent")

    means = np.abs(np.mean(samples, axis=1, dtype=np.float64))
    for frame in np.flatnonzero(means > MAX_FRAME_MEAN):
        warnings.append(f"frame {frame}: DC offset {means[frame]:.3g} exceeds {MAX_FRAME_MEAN}")

    if errors:
        return ValidationResult.failure(errors, warnings)
    return ValidationResult.success(warnings)


def _is_power_of_two(n: int) -> bool:
    """Check if a number is a power of two."""
    return n > 0 and (n & (n - 1)) == 0
