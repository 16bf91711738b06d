"""
TunerSession: the per-frame tuning loop with its cross-frame memory.

State machine::

    IDLE ──start()──→ LISTENING ──process_frame()──→ LISTENING ...
      ↑                  │
      └─────stop()───────┘

The session owns exactly one TrackingState, created by start() and dropped by
stop(). Nothing is shared between sessions, so several tuners can run side
by side (tests, one detector per string, ...). A session is not thread-safe:
frames must be processed one at a time, in temporal order.

The session never schedules itself. The host calls process_frame() from
whatever loop it has (audio callback, timer, a for-loop over a recording)
and hands the returned TuningStatus to its display.

Usage::

    with TunerSession(target="A2") as session:
        for frame in frames:
            status = session.process_frame(frame, sample_rate)
            render(status)
"""

import logging
from enum import Enum

from gtuner.errors import InvalidSessionState
from gtuner.evaluation import TuningEvaluator
from gtuner.notes import correct_octave, frequency_to_note_name, target_from_name
from gtuner.pitch import AutocorrelationDetector, as_frame
from gtuner.smoothing import TemporalSmoother
from gtuner.types import AUTO, GuitarString, TrackingState, TuningStatus

logger = logging.getLogger(__name__)


class SessionState(Enum):
    IDLE = "idle"
    LISTENING = "listening"


class TunerSession:
    def __init__(self, target=AUTO, detector=None):
        self._target = target_from_name(target)
        self._detector = detector or AutocorrelationDetector()
        self._smoother = TemporalSmoother()
        self._evaluator = TuningEvaluator()
        self._tracking = None
        self._state = SessionState.IDLE

    @property
    def state(self):
        return self._state

    @property
    def target(self):
        return self._target

    @property
    def tracking(self):
        """The live TrackingState, or None while idle."""
        return self._tracking

    @property
    def is_listening(self):
        return self._state is SessionState.LISTENING

    def start(self):
        """Allocate fresh tracking state and start listening. No-op if already listening."""
        if self.is_listening:
            return
        self._tracking = TrackingState()
        self._state = SessionState.LISTENING
        logger.debug("Tuner session started (target=%s)", self._target.name)

    def stop(self):
        """Drop the tracking state and go idle."""
        self._tracking = None
        self._state = SessionState.IDLE
        logger.debug("Tuner session stopped")

    def select_target(self, ref):
        """
        Lock onto a string, or go back to auto mode.

        Accepts a GuitarString, AUTO, or a name such as "E2" / "auto". Valid in
        any state; always clears smoothing history, velocity and confidence.
        """
        self._target = target_from_name(ref)
        if self._tracking is not None:
            self._tracking.reset()
        logger.debug("Target set to %s, tracking state reset", self._target.name)

    set_target = select_target

    def process_frame(self, samples, sample_rate):
        """
        Run one frame through detection, octave correction, smoothing and
        evaluation.

        Args:
            samples: 1-D float samples of one frame
            sample_rate: Sample rate in Hz

        Returns:
            TuningStatus for this frame. Frames without a stable pitch give a
            LISTENING status and leave the tracking state untouched.

        Raises:
            InvalidSessionState: if the session is not listening.
            InvalidFrame: if the frame is empty, not 1-D, or sample_rate <= 0.
        """
        if not self.is_listening:
            raise InvalidSessionState(f"process_frame() requires a listening session, state is {self._state.value}")
        audio = as_frame(samples, sample_rate)
        tracking = self._tracking
        target = self._target

        estimate = self._detector.detect(audio, sample_rate)
        if not estimate:
            return TuningStatus.listening(target.name, tracking.smoothed_cents, tracking.confidence)

        freq = estimate.frequency_hz
        if isinstance(target, GuitarString):
            freq = correct_octave(freq, target.frequency_hz)

        result = self._smoother.update(tracking, freq, target)
        confidence, status = self._evaluator.evaluate(tracking)

        return TuningStatus(
            display_name=target.name,
            frequency_hz=result.frequency_hz,
            note_name=frequency_to_note_name(result.frequency_hz),
            rounded_cents=int(round(tracking.smoothed_cents)),
            smoothed_cents_raw=tracking.smoothed_cents,
            confidence=confidence,
            status=status,
        )

    on_frame = process_frame

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
        return False
