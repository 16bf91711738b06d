"""
Confidence and tuning verdict.

Confidence is not a probability. It is an EMA of how still the reading is:

    stability  = 1 - min(1, |velocity| / 20)
    confidence = 0.8 * confidence + 0.2 * stability

so it only climbs after several calm frames in a row and drops as soon as
the reading starts moving.
"""

from gtuner.config import (
    CONFIDENCE_DECAY,
    CONFIDENCE_GAIN,
    IN_TUNE_CENTS,
    IN_TUNE_CONFIDENCE,
    SETTLING_CONFIDENCE,
    STABILITY_SPAN,
)
from gtuner.types import Status


def stability(velocity):
    return 1 - min(1.0, abs(velocity) / STABILITY_SPAN)


def classify(smoothed_cents, confidence):
    """Map the unclamped smoothed offset and confidence to a Status."""
    if abs(smoothed_cents) <= IN_TUNE_CENTS and confidence > IN_TUNE_CONFIDENCE:
        return Status.IN_TUNE
    if confidence < SETTLING_CONFIDENCE:
        return Status.SETTLING
    return Status.TUNING


class TuningEvaluator:
    def evaluate(self, state):
        """
        Update state.confidence from the current velocity and classify.

        Returns:
            (confidence, Status)
        """
        state.confidence = CONFIDENCE_DECAY * state.confidence + CONFIDENCE_GAIN * stability(state.velocity)
        return state.confidence, classify(state.smoothed_cents, state.confidence)
