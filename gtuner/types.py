"""
Data types shared by the tuner engine.

Values that travel between components (targets, pitch estimates, per-frame
results) are frozen dataclasses. The only mutable type is TrackingState, the
cross-frame memory of a single TunerSession.

A pitch estimate is either Detected(frequency_hz) or NoPitch(reason). There
is no magic "-1 Hz" value: code that wants a frequency has to check which one
it got, so "no pitch" can never leak into arithmetic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from gtuner.config import (
    DISPLAY_CENTS,
    IN_TUNE_CENTS,
    MIN_NEEDLE_OPACITY,
    NO_NOTE,
)


@dataclass(frozen=True)
class GuitarString:
    """One string of the tuning table, used as a locked target."""

    name: str
    frequency_hz: float


@dataclass(frozen=True)
class Auto:
    """No locked target: every reading is compared to the nearest string."""

    name: str = "Auto"


AUTO = Auto()

TargetReference = Union[GuitarString, Auto]


class NoPitchReason(Enum):
    TOO_QUIET = "too quiet"
    NO_PERIODICITY = "no periodicity"
    OUT_OF_RANGE = "out of range"
    DEGENERATE = "degenerate signal"


@dataclass(frozen=True)
class Detected:
    """A fundamental frequency found in one frame."""

    frequency_hz: float

    def __bool__(self):
        return True


@dataclass(frozen=True)
class NoPitch:
    """No stable periodic signal in this frame. Not an error."""

    reason: NoPitchReason = NoPitchReason.NO_PERIODICITY

    def __bool__(self):
        return False


PitchEstimate = Union[Detected, NoPitch]


class Status(Enum):
    IN_TUNE = "In tune!"
    SETTLING = "Settling…"
    TUNING = "Tuning…"
    LISTENING = "Listening… (no stable pitch)"

    @property
    def message(self):
        return self.value


@dataclass
class TrackingState:
    """
    Everything the tuner remembers between frames.

    Owned by exactly one TunerSession and reset whenever the target changes,
    so a reading taken against one string never biases the next one.
    """

    median_history: list[float] = field(default_factory=list)
    smoothed_cents: float = 0.0
    last_cents: float = 0.0
    velocity: float = 0.0
    confidence: float = 0.0

    def reset(self):
        self.median_history.clear()
        self.smoothed_cents = 0.0
        self.last_cents = 0.0
        self.velocity = 0.0
        self.confidence = 0.0


@dataclass(frozen=True)
class TuningStatus:
    """
    The engine's verdict for one frame, handed to the presentation sink.

    Invariants:
        0.0 <= confidence <= 1.0
        frequency_hz is None exactly when status is LISTENING
    """

    display_name: str
    """Locked string name, or 'Auto'."""

    frequency_hz: Optional[float]
    """Median-filtered frequency in Hz. None when no pitch was found."""

    note_name: str
    """Nearest equal-tempered note, e.g. 'A2'. '—' when no pitch was found."""

    rounded_cents: int
    """Smoothed offset from the reference string, rounded for display."""

    smoothed_cents_raw: float
    """Unclamped smoothed offset. Status decisions use this value."""

    confidence: float
    """How settled the reading is, in [0, 1]."""

    status: Status

    @classmethod
    def listening(cls, display_name, smoothed_cents=0.0, confidence=0.0):
        """Status for a frame without a usable pitch."""
        return cls(
            display_name=display_name,
            frequency_hz=None,
            note_name=NO_NOTE,
            rounded_cents=int(round(smoothed_cents)),
            smoothed_cents_raw=smoothed_cents,
            confidence=confidence,
            status=Status.LISTENING,
        )

    @property
    def message(self) -> str:
        return self.status.message

    @property
    def clamped_cents(self) -> float:
        """Smoothed offset clamped to the needle's [-50, 50] range."""
        return max(-DISPLAY_CENTS, min(DISPLAY_CENTS, self.smoothed_cents_raw))

    @property
    def needle_position(self) -> float:
        """Needle deflection in [-1, 1]; 0 is centred, positive is sharp."""
        return self.clamped_cents / DISPLAY_CENTS

    @property
    def needle_opacity(self) -> float:
        return max(MIN_NEEDLE_OPACITY, self.confidence)

    @property
    def direction(self) -> str:
        # cents > 0 means sharp (too high), so the string must go down
        if abs(self.smoothed_cents_raw) <= IN_TUNE_CENTS:
            return "in tune"
        return "tune down" if self.smoothed_cents_raw > 0 else "tune up"
