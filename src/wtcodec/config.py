from dataclasses import dataclass
from enum import Enum

DEFAULT_MAX_PAYLOAD_BYTES = 64 * 1024 * 1024
DEFAULT_MAX_TABLE_SAMPLES = 16 * 1024 * 1024


class HarmonicQuantization(str, Enum):
    """How a quantized harmonic amplitude maps back to a bin magnitude.

    ``prescaled`` treats ``q / 4096`` as the amplitude already multiplied by
    ``2 / N`` on the encoder side, so the decoder restores ``N / 2``.
    ``normalized`` treats ``q / 65535`` as the amplitude itself.
    """

    prescaled = "prescaled"
    normalized = "normalized"


class NoiseQuantization(str, Enum):
    """How a quantized noise-band level maps back to a linear bin magnitude.

    ``half_db`` reads the int16 as signed half-decibels scaled by ``N / 2``.
    ``linear_range`` maps the int16 onto ``[-dbRange, 0]`` dB.
    """

    half_db = "half_db"
    linear_range = "linear_range"


@dataclass(frozen=True)
class LoaderConfig:
    max_payload_bytes: int = DEFAULT_MAX_PAYLOAD_BYTES
    # Upper bound on frames x tableSize declared by a framepack header.
    max_table_samples: int = DEFAULT_MAX_TABLE_SAMPLES
    harmonic_quantization: HarmonicQuantization = HarmonicQuantization.prescaled
    noise_quantization: NoiseQuantization = NoiseQuantization.half_db
    residual_tolerance: float = 1e-4
    target_peak: float = 0.999
    # Peaks at or below this level are left unnormalized.
    silence_threshold: float = 0.0
