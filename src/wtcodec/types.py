import math
from dataclasses import dataclass
from typing import TypeAlias

import numpy as np
from numpy.typing import NDArray

WavetableData: TypeAlias = NDArray[np.float32]
MagnitudeSpectrum: TypeAlias = NDArray[np.float32]

DEFAULT_WAVETABLE_NAME = "Wavetable"


@dataclass(frozen=True, eq=False)
class Wavetable:
    """A decoded multi-frame wavetable.

    Samples are copied into a read-only float32 array on construction, so a
    published wavetable can be shared with realtime readers without locking.
    """

    samples: WavetableData
    """Array of shape (frames, table_size)."""

    name: str = DEFAULT_WAVETABLE_NAME
    """Short display label."""

    def __post_init__(self) -> None:
        samples = np.array(self.samples, dtype=np.float32, order="C")
        if samples.ndim != 2:
            raise ValueError(f"samples must be 2-D (frames, table_size), got {samples.ndim}-D")
        samples.flags.writeable = False
        object.__setattr__(self, "samples", samples)
        object.__setattr__(self, "name", self.name or DEFAULT_WAVETABLE_NAME)

    @property
    def num_frames(self) -> int:
        """Number of frames along the morph axis."""
        return int(self.samples.shape[0])

    @property
    def table_size(self) -> int:
        """Number of samples per single-cycle frame."""
        return int(self.samples.shape[1])

    @property
    def peak(self) -> float:
        return float(np.max(np.abs(self.samples))) if self.samples.size else 0.0

    def sample(self, phase: float, morph: float) -> float:
        """Read one sample by bilinear interpolation.

        Args:
            phase: Position within the cycle; wrapped into [0, 1).
            morph: Position along the frame axis; clamped to [0, 1].

        Returns:
            Interpolated sample value.
        """
        n = self.table_size
        f = self.num_frames
        if n <= 1 or f <= 0:
            return 0.0

        frame_pos = min(max(morph, 0.0), 1.0) * (f - 1)
        f0 = int(math.floor(frame_pos))
        f1 = min(f0 + 1, f - 1)
        tf = frame_pos - f0

        idx = (phase - math.floor(phase)) * n
        i0 = int(math.floor(idx)) % n
        i1 = (i0 + 1) % n
        t = idx - math.floor(idx)

        a0 = float(self.samples[f0, i0])
        a1 = float(self.samples[f0, i1])
        b0 = float(self.samples[f1, i0])
        b1 = float(self.samples[f1, i1])

        sa = a0 + (a1 - a0) * t
        sb = b0 + (b1 - b0) * t
        return sa + (sb - sa) * tf
