"""
Temporal smoothing of per-frame pitch readings.

A raw reading jumps around from frame to frame (pick attack, decaying
harmonics, room noise). Three stages turn it into a needle that settles:

  1. Median filter over the last few readings: throws away single-frame
     outliers (e.g. one frame locked on a harmonic). High strings change
     faster, so they get a shorter window (4 frames above 200 Hz, 7 below).
  2. Velocity: an exponential estimate of how fast the cents offset is
     moving. A fast-moving reading means the player is turning the peg, or
     the estimate is jittering; both call for more damping.
  3. Adaptive EMA of the cents offset:
         smoothed += alpha * (cents - smoothed)
     A fixed alpha either lags behind a fresh pluck or jitters on the
     sustain. Here alpha is larger for large deviations (fast lock-on) and
     shrinks as |velocity| grows (stable steady state).
"""

from collections import namedtuple

import numpy as np

from gtuner.config import (
    AUTO_ALPHA,
    AUTO_DEVIATION_CENTS,
    HIGH_FREQ_HZ,
    LOCKED_ALPHA_HIGH,
    LOCKED_ALPHA_LOW,
    LOCKED_DEVIATION_CENTS,
    MEDIAN_WINDOW_HIGH,
    MEDIAN_WINDOW_LOW,
    VELOCITY_DAMPING_SPAN,
    VELOCITY_DECAY,
    VELOCITY_FACTOR_FLOOR,
    VELOCITY_GAIN,
)
from gtuner.notes import cents_off, nearest_string
from gtuner.types import GuitarString

SmoothingResult = namedtuple("SmoothingResult", ["frequency_hz", "base", "cents"])


def median_window_size(freq):
    return MEDIAN_WINDOW_HIGH if freq > HIGH_FREQ_HZ else MEDIAN_WINDOW_LOW


def median_filter(value, history, size):
    """
    Push value into history (keeping at most `size` newest entries) and
    return the median of what is left.

    For even-sized windows this is the upper of the two middle values, so the
    output is always one of the actual readings.
    """
    history.append(value)
    while len(history) > size:
        history.pop(0)
    return float(np.sort(history)[len(history) // 2])


def update_velocity(state, cents):
    state.velocity = VELOCITY_DECAY * state.velocity + VELOCITY_GAIN * (cents - state.last_cents)
    state.last_cents = cents
    return state.velocity


def velocity_factor(velocity):
    """Damping multiplier in [0.5, 1]: 1 when still, 0.5 when moving fast."""
    return max(VELOCITY_FACTOR_FLOOR, 1 - abs(velocity) / VELOCITY_DAMPING_SPAN)


def smoothing_alpha(freq, deviation, locked, velocity):
    """
    EMA rate for this frame.

    Args:
        freq: Filtered frequency in Hz
        deviation: |cents - smoothed_cents| before this frame's update
        locked: True when a string is selected, False in auto mode
        velocity: Current cents velocity

    Returns:
        alpha, already scaled by the velocity damping factor
    """
    if locked:
        large, small = LOCKED_ALPHA_HIGH if freq > HIGH_FREQ_HZ else LOCKED_ALPHA_LOW
        alpha = large if deviation > LOCKED_DEVIATION_CENTS else small
    else:
        large, small = AUTO_ALPHA
        alpha = large if deviation > AUTO_DEVIATION_CENTS else small
    return alpha * velocity_factor(velocity)


class TemporalSmoother:
    """
    Carries a frequency reading through median filtering and adaptive EMA.

    Holds no state of its own: everything that survives between frames lives
    in the TrackingState passed to update(), so one smoother can serve any
    number of sessions.
    """

    def update(self, state, frequency, target=None):
        """
        Fold one (octave-corrected) frequency reading into the tracking state.

        Args:
            state: TrackingState to mutate
            frequency: Reading in Hz, > 0
            target: Locked GuitarString, or None / AUTO for auto mode

        Returns:
            SmoothingResult(frequency_hz, base, cents): the median-filtered
            frequency, the string it was compared against, and its whole-cent
            offset from that string.
        """
        locked = isinstance(target, GuitarString)
        # In auto mode the reference is picked from the unfiltered reading
        base = target if locked else nearest_string(frequency)

        filtered = median_filter(frequency, state.median_history, median_window_size(frequency))
        cents = cents_off(filtered, base.frequency_hz)

        deviation = abs(cents - state.smoothed_cents)
        velocity = update_velocity(state, cents)
        alpha = smoothing_alpha(filtered, deviation, locked, velocity)
        state.smoothed_cents += alpha * (cents - state.smoothed_cents)

        return SmoothingResult(filtered, base, cents)
