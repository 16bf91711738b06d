"""
Pitch detection module: finds the fundamental of a plucked string in one frame.

HOW AUTOCORRELATION FINDS PITCH
  A periodic signal looks like a shifted copy of itself once the shift (lag)
  equals one period. Autocorrelation measures that similarity for every lag:

      ac[lag] = sum_i x[i] * x[i + lag]

  After dividing by ac[0] (the signal's energy), a clean periodic signal gives
  a peak close to 1.0 at lag = period. frequency = sample_rate / period.

WHY AUTOCORRELATION FOR GUITAR
  Plucked strings are harmonic-rich: the 2nd and 3rd harmonics can be louder
  than the fundamental, which fools "loudest FFT bin" detectors. The period
  of the whole waveform is still the fundamental's period, so the
  autocorrelation peak stays in the right place.

THE GATES
  - RMS gate: quiet frames are mostly noise, their peaks are meaningless.
  - Edge trimming: loud edges of the frame cut a cycle in half and smear the
    autocorrelation, so we start and end the analysis on quiet samples.
  - Lag window: only periods between 1/500 s and 1/75 s are searched (the
    guitar's range with margin), and the peak must exceed 0.4.
  - Parabolic interpolation: the true period is rarely a whole number of
    samples. Fitting a parabola through the peak and its two neighbours
    recovers the fractional part (at 44.1kHz, one sample of lag error at
    330 Hz would be ~13 cents).
"""

import logging
import math

import librosa
import numpy as np

from gtuner.config import (
    FMAX,
    FMIN,
    PEAK_THRESHOLD,
    PERIOD_MAX_HZ,
    PERIOD_MIN_HZ,
    RMS_GATE,
    SAMPLE_RATE,
    TRIM_THRESHOLD,
)
from gtuner.errors import InvalidFrame
from gtuner.types import Detected, NoPitch, NoPitchReason

logger = logging.getLogger(__name__)


def as_frame(samples, sample_rate):
    """
    Validate one audio frame and return it as a float64 array.

    Raises:
        InvalidFrame: empty buffer, non 1-D samples or sample_rate <= 0.
    """
    if sample_rate is None or not sample_rate > 0:
        raise InvalidFrame(f"sample_rate must be > 0, got {sample_rate}")
    audio = np.asarray(samples, dtype=np.float64)
    if audio.ndim != 1:
        raise InvalidFrame(f"Expected 1-D samples, got shape {audio.shape}")
    if audio.size == 0:
        raise InvalidFrame("Empty sample buffer")
    return audio


def trim_edges(audio, threshold=TRIM_THRESHOLD):
    """
    Find the analysis range [r1, r2) of a frame.

    r1 is the first quiet sample (|x| < threshold) in the first half of the
    frame, r2 the last quiet sample in the second half. Without quiet samples
    the range falls back to [0, len - 1).
    """
    n = len(audio)
    half = -(-n // 2)  # indices i < n / 2
    quiet = np.abs(audio) < threshold

    head = np.flatnonzero(quiet[:half])
    r1 = int(head[0]) if head.size else 0

    # Scan backwards from the last sample, i = 1 .. half - 1 samples from the end
    tail = np.flatnonzero(quiet[n - 1 : n - half : -1])
    r2 = n - 1 - int(tail[0]) if tail.size else n - 1
    return r1, r2


def normalized_autocorrelation(audio):
    """ac[lag] / ac[0] for every lag, or None if the signal has no energy."""
    ac = librosa.autocorrelate(audio)
    if ac[0] == 0:
        return None
    return ac / ac[0]


def find_peak(ac, min_lag, max_lag, threshold=PEAK_THRESHOLD):
    """
    Strongest strict local maximum of ac in [min_lag, max_lag) above threshold.

    Returns:
        The peak's lag index, or None if there is no qualifying peak.
    """
    lo = max(min_lag, 1)
    hi = min(max_lag, len(ac) - 1)
    if hi <= lo:
        return None

    values = ac[lo:hi]
    is_peak = (
        (values > threshold)
        & (values > ac[lo - 1 : hi - 1])
        & (values >= ac[lo + 1 : hi + 1])
    )
    if not is_peak.any():
        return None
    # argmax returns the first of equal maxima, i.e. the shortest lag
    return lo + int(np.argmax(np.where(is_peak, values, -np.inf)))


def parabolic_shift(y0, y1, y2):
    """Offset of a parabola's vertex from the middle of three samples."""
    denom = y0 - 2 * y1 + y2
    if denom == 0:
        return 0.0
    return 0.5 * (y0 - y2) / denom


def estimate_pitch(samples, sample_rate=SAMPLE_RATE):
    """
    Estimate the fundamental frequency of one frame.

    Args:
        samples: 1-D float samples, normalized to roughly [-1, 1]
        sample_rate: Sample rate in Hz

    Returns:
        Detected(frequency_hz), or NoPitch(reason) when the frame holds no
        stable periodic signal in the 70-500 Hz range.

    Raises:
        InvalidFrame: if the frame itself is malformed.
    """
    audio = as_frame(samples, sample_rate)

    rms = math.sqrt(float(np.mean(audio**2)))
    if rms < RMS_GATE:
        return NoPitch(NoPitchReason.TOO_QUIET)

    min_period = int(sample_rate // PERIOD_MIN_HZ)
    max_period = int(sample_rate // PERIOD_MAX_HZ)

    r1, r2 = trim_edges(audio)
    trimmed = audio[r1:r2]
    if trimmed.size == 0:
        return NoPitch(NoPitchReason.DEGENERATE)

    ac = normalized_autocorrelation(trimmed)
    if ac is None:
        return NoPitch(NoPitchReason.DEGENERATE)

    peak = find_peak(ac, min_period, max_period)
    if peak is None:
        return NoPitch(NoPitchReason.NO_PERIODICITY)

    refined_lag = peak + parabolic_shift(ac[peak - 1], ac[peak], ac[peak + 1])
    if refined_lag <= 0:
        return NoPitch(NoPitchReason.DEGENERATE)

    freq = sample_rate / refined_lag
    if not math.isfinite(freq) or freq <= 0:
        return NoPitch(NoPitchReason.DEGENERATE)
    if freq < FMIN or freq > FMAX:
        return NoPitch(NoPitchReason.OUT_OF_RANGE)
    return Detected(float(freq))


class AutocorrelationDetector:
    """
    Frame-by-frame pitch detector built on normalized autocorrelation.

    No model to load and no state between frames: every call to detect()
    only looks at the frame it is given.
    """

    def __init__(self, sample_rate=SAMPLE_RATE):
        self.sample_rate = sample_rate

    def detect(self, audio, sr=None):
        """
        Detect pitch from one audio frame.

        Returns:
            Detected(frequency_hz) or NoPitch(reason)
        """
        sr = self.sample_rate if sr is None else sr
        estimate = estimate_pitch(audio, sr)
        if not estimate:
            logger.debug("No pitch in %d-sample frame: %s", len(audio), estimate.reason.value)
        return estimate
