"""
Shared fixtures for the test suite.

Signals come from gtuner.synth so every test knows its ground truth.
"""

import numpy as np
import pytest

from gtuner.config import FRAME_SIZE, SAMPLE_RATE
from gtuner.notes import target_from_name
from gtuner.synth import generate_sine
from gtuner.types import Detected, NoPitch

# ---------------------------------------------------------------------------
# Scripted detector
# ---------------------------------------------------------------------------


class ScriptedDetector:
    """Detector that ignores the audio and replays a list of readings.

    Each entry is a frequency in Hz, or None for a frame without pitch.
    """

    def __init__(self, readings):
        self.readings = list(readings)
        self.calls = 0

    def detect(self, audio, sr=None):
        reading = self.readings[self.calls]
        self.calls += 1
        return NoPitch() if reading is None else Detected(reading)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def silent_frame():
    return np.zeros(FRAME_SIZE, dtype=np.float32)


@pytest.fixture()
def sine_frame():
    """Factory: sine_frame(freq) -> FRAME_SIZE samples at SAMPLE_RATE."""

    def _make(freq, amplitude=1.0):
        return generate_sine(freq, n_samples=FRAME_SIZE, sr=SAMPLE_RATE, amplitude=amplitude)

    return _make


@pytest.fixture()
def a2():
    return target_from_name("A2")


@pytest.fixture()
def scripted():
    """Factory: scripted([110.0, None, ...]) -> ScriptedDetector."""
    return ScriptedDetector
