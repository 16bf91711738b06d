"""
Synthetic signals: test tones, plucked-string imitations and reference tones.

WHY SYNTHETIC SIGNALS?
A recording of a real guitar has no ground truth: we never know its exact
frequency. Generated signals do, which is what the tests and the benchmark
need. We imitate a plucked string by combining:
  1. A fundamental frequency (the note's pitch)
  2. Harmonics (integer multiples of the fundamental that give the string its
     timbre and that trick naive pitch detectors)
  3. Random noise (simulates real-world recording conditions)

The same module builds the reference tone a player tunes against by ear.
"""

import numpy as np

from gtuner.config import (
    BENCHMARK_FREQ_RANGE,
    BENCHMARK_SAMPLES,
    FRAME_SIZE,
    REFERENCE_ATTACK,
    REFERENCE_DURATION,
    REFERENCE_GAIN,
    REFERENCE_TAIL,
    SAMPLE_RATE,
)
from gtuner.types import GuitarString


def _time_axis(n_samples, sr):
    return np.arange(n_samples) / sr


def generate_sine(freq, n_samples=FRAME_SIZE, sr=SAMPLE_RATE, amplitude=1.0, phase=0.0):
    """A pure sine wave, n_samples long."""
    t = _time_axis(n_samples, sr)
    return (amplitude * np.sin(2 * np.pi * freq * t + phase)).astype(np.float32)


def generate_harmonic_tone(f0, n_samples=FRAME_SIZE, sr=SAMPLE_RATE, n_harmonics=5, noise_level=0.01, rng=None):
    """
    Generate an audio signal that mimics a plucked string.

    Args:
        f0: Fundamental frequency in Hz (the "pitch" we hear)
        n_samples: Length in samples
        sr: Sample rate
        n_harmonics: Number of partials including the fundamental. A pure
                     sine wave has 1. Real guitar strings produce 5-15+.
        noise_level: Standard deviation of added gaussian noise
        rng: numpy Generator, for reproducible noise

    Returns:
        numpy array of audio samples (float32)
    """
    rng = rng if rng is not None else np.random.default_rng()
    t = _time_axis(n_samples, sr)
    signal = np.zeros_like(t)

    # A guitar string vibrating at 110 Hz (A2) also produces energy at
    # 220 Hz, 330 Hz, 440 Hz, etc. Each harmonic is quieter than the last.
    for h in range(1, n_harmonics + 1):
        amplitude = 1.0 / h  # 1, 1/2, 1/3, ...
        signal += amplitude * np.sin(2 * np.pi * f0 * h * t)

    # Normalize to [-1, 1] range (standard for audio)
    signal = signal / np.max(np.abs(signal))

    signal += noise_level * rng.standard_normal(len(signal))

    return signal.astype(np.float32)


def generate_reference_tone(target, sr=SAMPLE_RATE):
    """
    The tone a player tunes against by ear: a sine at the string's frequency.

    Gain rises from 0 to 0.25 over the first 50 ms, falls linearly back to 0
    at 1.0 s, and the buffer ends with 50 ms of silence.

    Raises:
        ValueError: if target is not a GuitarString (no reference in auto mode).
    """
    if not isinstance(target, GuitarString):
        raise ValueError("Select a string to play a reference tone")

    n_samples = int(round((REFERENCE_DURATION + REFERENCE_TAIL) * sr))
    t = _time_axis(n_samples, sr)
    envelope = np.interp(
        t,
        [0.0, REFERENCE_ATTACK, REFERENCE_DURATION],
        [0.0, REFERENCE_GAIN, 0.0],
        right=0.0,
    )
    return (envelope * np.sin(2 * np.pi * target.frequency_hz * t)).astype(np.float32)


def frames(audio, frame_size=FRAME_SIZE):
    """
    Split a signal into consecutive, non-overlapping frames.

    The trailing partial frame is dropped: every frame the tuner sees has the
    same length.
    """
    for start in range(0, len(audio) - frame_size + 1, frame_size):
        yield audio[start : start + frame_size]


def generate_dataset(n_samples=BENCHMARK_SAMPLES, freq_range=BENCHMARK_FREQ_RANGE, frame_size=FRAME_SIZE, seed=None):
    """
    Generate labelled plucked-string frames for evaluating the detector.

    The frequency range 75-400 Hz covers all standard tuning notes
    (E2=82Hz to E4=330Hz) with some margin on both sides.

    Returns:
        signals: list of numpy arrays, one frame each
        frequencies: numpy array of ground-truth f0 values
    """
    rng = np.random.default_rng(seed)
    signals = []
    frequencies = []

    for _ in range(n_samples):
        f0 = rng.uniform(*freq_range)

        # Vary timbre and noise so the numbers don't depend on one "sound"
        n_harmonics = int(rng.integers(1, 6))
        noise_level = rng.uniform(0.0, 0.03)

        signals.append(
            generate_harmonic_tone(
                f0,
                n_samples=frame_size,
                n_harmonics=n_harmonics,
                noise_level=noise_level,
                rng=rng,
            )
        )
        frequencies.append(f0)

    return signals, np.array(frequencies, dtype=np.float32)
