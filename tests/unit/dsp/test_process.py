"""Unit tests for wtcodec.dsp.process module."""

import numpy as np
import pytest
from hypothesis import given
from hypothesis import strategies as st
from hypothesis.extra.numpy import arrays

from wtcodec.dsp.process import dc_remove, normalize


class TestDcRemove:
    """Test per-frame DC removal."""

    def test_rows_become_zero_mean(self):
        frames = np.array([[1.0, 2.0, 3.0, 4.0], [-1.0, -1.0, 1.0, 5.0]])
        result = dc_remove(frames)

        np.testing.assert_allclose(result.mean(axis=1), 0.0, atol=1e-12)
        np.testing.assert_allclose(result[0], [-1.5, -0.5, 0.5, 1.5])

    def test_each_row_independent(self):
        frames = np.array([[5.0, 5.0], [0.0, 2.0]])
        result = dc_remove(frames)
        np.testing.assert_array_equal(result, [[0.0, 0.0], [-1.0, 1.0]])

    def test_preserves_dtype(self):
        frames = np.ones((2, 8), dtype=np.float32)
        assert dc_remove(frames).dtype == np.float32

    def test_single_frame(self):
        result = dc_remove(np.array([0.0, 1.0, 2.0]))
        np.testing.assert_allclose(result, [-1.0, 0.0, 1.0])

    @given(
        arrays(
            np.float32,
            st.tuples(st.integers(1, 4), st.sampled_from([2, 8, 64, 512])),
            elements=st.floats(-1.0, 1.0, width=32),
        )
    )
    def test_mean_tolerance_hypothesis(self, frames):
        result = dc_remove(frames)
        means = np.abs(np.mean(result, axis=1, dtype=np.float64))
        assert np.all(means <= 1e-5)


class TestNormalize:
    """Test global peak normalization."""

    def test_scales_to_target_peak(self):
        frames = np.array([[0.1, -0.5], [0.25, 0.0]])
        result = normalize(frames)

        assert np.max(np.abs(result)) == pytest.approx(0.999)
        # One gain for all frames
        np.testing.assert_allclose(result, frames * (0.999 / 0.5))

    def test_custom_peak(self):
        result = normalize(np.array([2.0, -4.0]), peak=0.5)
        np.testing.assert_allclose(result, [0.25, -0.5])

    def test_below_threshold_unchanged(self):
        frames = np.array([[1e-8, -1e-7]])
        assert normalize(frames) is frames

    def test_zero_threshold_normalizes_tiny_signal(self):
        frames = np.array([[1e-9, -2e-9]])
        result = normalize(frames, threshold=0.0)
        assert np.max(np.abs(result)) == pytest.approx(0.999)

    def test_silence_unchanged_with_zero_threshold(self):
        frames = np.zeros((2, 4))
        result = normalize(frames, threshold=0.0)
        np.testing.assert_array_equal(result, frames)

    def test_empty(self):
        frames = np.zeros((0, 8), dtype=np.float32)
        assert normalize(frames).shape == (0, 8)

    def test_preserves_dtype(self):
        frames = np.array([[0.5, -0.25]], dtype=np.float32)
        assert normalize(frames).dtype == np.float32
