"""Property-based tests of decoded wavetables."""

import numpy as np
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from docbuilder import build_document, build_framepack
from wtcodec.dsp.minphase import (
    fold_cepstrum,
    imaginary_residual,
    log_magnitude_spectrum,
    minimum_phase_spectrum,
    real_cepstrum,
)
from wtcodec.dsp.spectrum import assemble_spectrum
from wtcodec.format.framepack import dequantize_harmonics
from wtcodec.loader import decode_document
from wtcodec.registry import SlotRegistry


@st.composite
def framepacks(draw):
    """Valid framepacks with random dimensions and quantized content."""
    table_size = 2 ** draw(st.integers(1, 8))
    frames = draw(st.integers(1, 4))
    harmonics = draw(st.integers(0, min(table_size, 64)))
    bands = draw(st.integers(0, 4))
    harmonic_values = draw(
        st.lists(
            st.lists(st.integers(0, 65535), min_size=harmonics, max_size=harmonics),
            min_size=frames,
            max_size=frames,
        )
    )
    noise_values = draw(
        st.lists(
            st.lists(st.integers(-240, 60), min_size=bands, max_size=bands),
            min_size=frames,
            max_size=frames,
        )
    )
    return table_size, build_framepack(table_size, harmonic_values, noise_values)


@st.composite
def magnitude_spectra(draw):
    table_size = 2 ** draw(st.integers(1, 10))
    values = draw(
        st.lists(
            st.floats(0.0, 100.0, width=32),
            min_size=table_size // 2 + 1,
            max_size=table_size // 2 + 1,
        )
    )
    return np.array(values, dtype=np.float32)


class TestDecodedInvariants:
    """Invariants that hold for every successfully decoded document."""

    @settings(max_examples=50, deadline=None)
    @given(framepacks())
    def test_shape_mean_and_peak(self, case):
        table_size, payload = case
        wavetable = decode_document(build_document(payload))

        assert wavetable.table_size == table_size
        assert table_size & (table_size - 1) == 0
        assert np.all(np.isfinite(wavetable.samples))

        means = np.abs(np.mean(wavetable.samples, axis=1, dtype=np.float64))
        assert np.all(means <= 1e-5)
        assert wavetable.peak <= 1.0

    @settings(max_examples=25, deadline=None)
    @given(framepacks())
    def test_decoding_is_deterministic(self, case):
        _, payload = case
        text = build_document(payload)

        first = decode_document(text)
        second = decode_document(text)

        assert first.samples.tobytes() == second.samples.tobytes()


class TestSingleHarmonicRoundTrip:
    """A lone harmonic comes back as a lone spectral line at its bin."""

    @settings(max_examples=50, deadline=None)
    @given(
        exponent=st.integers(3, 10),
        data=st.data(),
    )
    def test_lone_harmonic(self, exponent, data):
        table_size = 2**exponent
        harmonic = data.draw(st.integers(0, table_size // 2 - 2))
        q = data.draw(st.integers(1, 65535))

        values = [0] * (harmonic + 1)
        values[harmonic] = q
        wavetable = decode_document(build_document(build_framepack(table_size, [values])))

        spectrum = np.abs(np.fft.rfft(wavetable.samples[0].astype(np.float64)))
        line = spectrum[harmonic + 1]
        assert int(np.argmax(spectrum)) == harmonic + 1
        assert np.max(np.delete(spectrum, harmonic + 1)) <= 5e-3 * line
        # A pure sinusoid never samples above its amplitude
        assert line * 2 / table_size >= 0.999 * (1 - 1e-4)

    @pytest.mark.parametrize("q", [1, 4096, 65535])
    def test_line_matches_quantized_value(self, q):
        table_size = 64
        harmonics = dequantize_harmonics(np.array([0, 0, q], dtype=np.uint16), table_size)
        magnitudes = assemble_spectrum(table_size, harmonics, np.array([]))

        assert magnitudes[3] == pytest.approx(q / 4096 * table_size / 2, rel=1e-6)


class TestMinimumPhaseSteps:
    """Structural properties of the intermediate reconstruction stages."""

    @settings(max_examples=50, deadline=None)
    @given(magnitude_spectra())
    def test_folded_cepstrum_is_causal(self, magnitudes):
        cepstrum = real_cepstrum(log_magnitude_spectrum(magnitudes))
        folded = fold_cepstrum(cepstrum)
        half = len(cepstrum) // 2

        assert np.all(folded[half + 1 :] == 0)
        np.testing.assert_array_equal(folded[1:half], cepstrum[1:half] * np.complex64(2))
        assert folded[0] == cepstrum[0]
        assert folded[half] == cepstrum[half]

    @settings(max_examples=50, deadline=None)
    @given(magnitude_spectra())
    def test_imaginary_residual_is_small(self, magnitudes):
        folded = fold_cepstrum(real_cepstrum(log_magnitude_spectrum(magnitudes)))
        signal = np.fft.ifft(minimum_phase_spectrum(folded))

        assert imaginary_residual(signal) <= 1e-4


class TestRegistrySnapshots:
    @settings(max_examples=25, deadline=None)
    @given(st.lists(st.tuples(st.integers(0, 3), st.booleans()), max_size=20))
    def test_snapshot_matches_last_write(self, operations):
        """Each slot reports whatever was last installed in it, or nothing after a clear."""
        registry = SlotRegistry()
        expected = [None] * 4

        for step, (slot, install) in enumerate(operations):
            if install:
                wavetable = decode_document(build_document(build_framepack(2, [[4096]])))
                registry.install(slot, wavetable, "", f"step {step}")
                expected[slot] = wavetable
            else:
                registry.clear(slot)
                expected[slot] = None

        snapshot = registry.snapshot()
        assert all(a is b for a, b in zip(snapshot, expected, strict=True))
