"""
Tests for gtuner/pitch.py — autocorrelation pitch detection.

Tests cover:
    - Pure helpers (trim_edges, find_peak, parabolic_shift, as_frame)
    - Pure and harmonic-rich tone recovery across the six strings
    - Rejection paths: silence, quiet frames, out-of-range pitch
"""

import numpy as np
import pytest

from gtuner.config import SAMPLE_RATE, STANDARD_TUNING
from gtuner.errors import InvalidFrame
from gtuner.pitch import (
    AutocorrelationDetector,
    as_frame,
    estimate_pitch,
    find_peak,
    parabolic_shift,
    trim_edges,
)
from gtuner.synth import generate_harmonic_tone
from gtuner.types import Detected, NoPitch, NoPitchReason

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestTrimEdges:
    def test_no_quiet_samples_keeps_whole_frame(self):
        """Without quiet samples the range is [0, len - 1)."""
        assert trim_edges(np.ones(10)) == (0, 9)

    def test_quiet_ends(self):
        audio = np.array([0.0, 1, 1, 1, 1, 1, 1, 0.0])
        assert trim_edges(audio) == (0, 7)

    def test_first_quiet_sample_from_each_side(self):
        audio = np.array([1, 1, 0.1, 1, 1, 1, 0.05, 1])
        assert trim_edges(audio) == (2, 6)

    def test_only_scans_half_of_the_frame(self):
        """A quiet sample in the second half does not move r1."""
        audio = np.array([1, 1, 1, 1, 1, 0.0, 1, 1])
        r1, _ = trim_edges(audio)
        assert r1 == 0


class TestFindPeak:
    def test_picks_largest_local_maximum(self):
        ac = np.array([1.0, 0.2, 0.5, 0.3, 0.9, 0.4, 0.6, 0.1])
        assert find_peak(ac, 1, 7) == 4

    def test_ignores_peaks_below_threshold(self):
        ac = np.array([1.0, 0.1, 0.35, 0.1, 0.2, 0.1])
        assert find_peak(ac, 1, 5) is None

    def test_respects_lag_window(self):
        ac = np.array([1.0, 0.2, 0.9, 0.2, 0.6, 0.2, 0.1])
        assert find_peak(ac, 3, 6) == 4

    def test_plateau_counts_once(self):
        """ac[i] >= ac[i+1] allows the left edge of a plateau."""
        ac = np.array([1.0, 0.2, 0.7, 0.7, 0.2, 0.1])
        assert find_peak(ac, 1, 5) == 2

    def test_monotonic_has_no_peak(self):
        assert find_peak(np.linspace(1, 0, 20), 1, 19) is None

    def test_empty_window(self):
        assert find_peak(np.ones(5), 10, 20) is None


class TestParabolicShift:
    def test_symmetric_peak(self):
        assert parabolic_shift(0.5, 1.0, 0.5) == 0.0

    def test_leans_toward_larger_neighbour(self):
        assert parabolic_shift(0.8, 1.0, 0.6) == pytest.approx(-1 / 6)
        assert parabolic_shift(0.6, 1.0, 0.8) == pytest.approx(1 / 6)

    def test_flat_guard(self):
        """Zero denominator gives no shift instead of dividing by zero."""
        assert parabolic_shift(1.0, 1.0, 1.0) == 0.0


class TestAsFrame:
    def test_converts_lists(self):
        audio = as_frame([0.0, 0.5, -0.5], 44100)
        assert audio.dtype == np.float64

    def test_empty_buffer(self):
        with pytest.raises(InvalidFrame, match="Empty"):
            as_frame([], 44100)

    @pytest.mark.parametrize("sr", [0, -44100, None])
    def test_bad_sample_rate(self, sr):
        with pytest.raises(InvalidFrame, match="sample_rate"):
            as_frame(np.zeros(16), sr)

    def test_two_dimensional(self):
        with pytest.raises(InvalidFrame, match="1-D"):
            as_frame(np.zeros((2, 16)), 44100)

    def test_is_a_value_error(self):
        with pytest.raises(ValueError):
            as_frame([], 44100)


# ---------------------------------------------------------------------------
# estimate_pitch
# ---------------------------------------------------------------------------


class TestPureToneRecovery:
    @pytest.mark.parametrize("freq", list(STANDARD_TUNING.values()))
    def test_open_string_within_one_percent(self, sine_frame, freq):
        estimate = estimate_pitch(sine_frame(freq), SAMPLE_RATE)
        assert isinstance(estimate, Detected)
        assert estimate.frequency_hz == pytest.approx(freq, rel=0.01)

    @pytest.mark.parametrize("freq", [82.41, 110.0, 196.0, 329.63])
    def test_harmonic_rich_string(self, freq):
        """A plucked-string imitation is still read at its fundamental."""
        rng = np.random.default_rng(7)
        audio = generate_harmonic_tone(freq, n_harmonics=5, noise_level=0.01, rng=rng)
        estimate = estimate_pitch(audio, SAMPLE_RATE)
        assert estimate
        assert estimate.frequency_hz == pytest.approx(freq, rel=0.01)

    def test_accepts_plain_lists(self, sine_frame):
        estimate = estimate_pitch(sine_frame(110.0).tolist(), SAMPLE_RATE)
        assert estimate.frequency_hz == pytest.approx(110.0, rel=0.01)

    def test_other_sample_rate(self):
        from gtuner.synth import generate_sine

        audio = generate_sine(146.83, n_samples=4096, sr=48000)
        estimate = estimate_pitch(audio, 48000)
        assert estimate.frequency_hz == pytest.approx(146.83, rel=0.01)


class TestRejection:
    def test_silence(self, silent_frame):
        estimate = estimate_pitch(silent_frame, SAMPLE_RATE)
        assert estimate == NoPitch(NoPitchReason.TOO_QUIET)
        assert not estimate

    def test_quiet_tone(self, sine_frame):
        """RMS of a 0.005-amplitude sine is ~0.0035, below the gate."""
        estimate = estimate_pitch(sine_frame(110.0, amplitude=0.005), SAMPLE_RATE)
        assert isinstance(estimate, NoPitch)
        assert estimate.reason is NoPitchReason.TOO_QUIET

    def test_below_guitar_range(self, sine_frame):
        """A 50 Hz period is longer than the longest lag searched."""
        assert isinstance(estimate_pitch(sine_frame(50.0), SAMPLE_RATE), NoPitch)

    def test_white_noise(self):
        rng = np.random.default_rng(0)
        audio = rng.uniform(-0.5, 0.5, 4096)
        assert isinstance(estimate_pitch(audio, SAMPLE_RATE), NoPitch)

    def test_single_sample(self):
        assert isinstance(estimate_pitch([0.9], SAMPLE_RATE), NoPitch)

    def test_invalid_frame_raises(self):
        with pytest.raises(InvalidFrame):
            estimate_pitch([], SAMPLE_RATE)


class TestAutocorrelationDetector:
    def test_default_sample_rate(self, sine_frame):
        detector = AutocorrelationDetector()
        assert detector.detect(sine_frame(246.94)).frequency_hz == pytest.approx(246.94, rel=0.01)

    def test_explicit_sample_rate_wins(self, sine_frame):
        detector = AutocorrelationDetector(sample_rate=22050)
        estimate = detector.detect(sine_frame(196.0), SAMPLE_RATE)
        assert estimate.frequency_hz == pytest.approx(196.0, rel=0.01)

    def test_no_pitch_is_returned_not_raised(self, silent_frame):
        assert not AutocorrelationDetector().detect(silent_frame)
