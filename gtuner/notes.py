"""
Note naming, cents arithmetic and octave correction.

All functions here are pure: they only look at their arguments and the
tuning table in config.

CENTS
  Musicians measure pitch distance in cents. 100 cents = 1 semitone,
  1200 cents = 1 octave:  cents = 1200 * log2(detected / reference)
  Positive = sharp (too high), negative = flat (too low).

OCTAVE AMBIGUITY
  Autocorrelation sometimes locks onto the 2nd harmonic (one octave up) or
  onto every other period (one octave down). When the player tells us which
  string they are tuning, we can fold the reading back into that string's
  octave.
"""

import math

from gtuner.config import (
    A4_HZ,
    A4_MIDI,
    AUTO_NAME,
    NO_NOTE,
    NOTE_NAMES,
    OCTAVE_LOWER_RATIO,
    OCTAVE_UPPER_RATIO,
    STANDARD_TUNING,
)
from gtuner.types import AUTO, Auto, GuitarString, NoPitch

GUITAR_STRINGS = tuple(GuitarString(name, freq) for name, freq in STANDARD_TUNING.items())


def frequency_to_midi(freq):
    """Nearest MIDI note number: round(12 * log2(f / 440) + 69)."""
    return int(round(12 * math.log2(freq / A4_HZ) + A4_MIDI))


def frequency_to_note_name(freq):
    """
    Name the equal-tempered note closest to a frequency.

    Args:
        freq: Frequency in Hz. None, NoPitch or anything <= 0 gives "—".

    Returns:
        Scientific pitch notation, e.g. "A4", "C#3".
    """
    if freq is None or isinstance(freq, NoPitch) or freq <= 0:
        return NO_NOTE
    midi = frequency_to_midi(freq)
    note = NOTE_NAMES[midi % 12]
    octave = midi // 12 - 1
    return f"{note}{octave}"


def cents_off(freq, reference):
    """Offset of freq from reference in whole cents (0 if either is <= 0)."""
    if not freq or not reference or freq <= 0 or reference <= 0:
        return 0
    return int(round(1200 * math.log2(freq / reference)))


def nearest_string(freq, strings=GUITAR_STRINGS):
    """The string whose open frequency is closest to freq, in Hz."""
    return min(strings, key=lambda s: abs(freq - s.frequency_hz))


def correct_octave(detected, target):
    """
    Fold a detected frequency into the octave of the target.

    Halves while above 1.5x the target and doubles while below 0.75x, so the
    result always lands in [0.75 * target, 1.5 * target].
    """
    if detected <= 0 or target <= 0:
        raise ValueError(f"Frequencies must be > 0, got detected={detected}, target={target}")
    corrected = detected
    while corrected > target * OCTAVE_UPPER_RATIO:
        corrected /= 2  # octave down
    while corrected < target * OCTAVE_LOWER_RATIO:
        corrected *= 2  # octave up
    return corrected


def target_from_name(name):
    """
    Resolve a string name ("E2", "a2", "AUTO") to a target reference.

    Raises:
        ValueError: if the name is not in the standard tuning.
    """
    if isinstance(name, (GuitarString, Auto)):
        return name
    key = name.strip().upper()
    if key == AUTO_NAME:
        return AUTO
    for string in GUITAR_STRINGS:
        if string.name.upper() == key:
            return string
    valid = ", ".join([AUTO_NAME] + [s.name for s in GUITAR_STRINGS])
    raise ValueError(f"Unknown target {name!r}, valid options: {valid}")


def freq_to_note_and_cents(freq, tuning=None):
    """
    Given a detected frequency, find the closest guitar string and how
    many cents sharp/flat it is.

    Args:
        freq: Detected frequency in Hz
        tuning: Dict of {string_label: target_hz}. Defaults to STANDARD_TUNING.

    Returns:
        (string_name, target_freq, cents_deviation), or (None, None, None)
        when freq is not a positive frequency.
        cents > 0 means sharp, cents < 0 means flat
    """
    if freq is None or isinstance(freq, NoPitch) or freq <= 0:
        return None, None, None

    if tuning is None:
        tuning = STANDARD_TUNING

    strings = [GuitarString(name, target) for name, target in tuning.items()]
    closest = nearest_string(freq, strings)
    return closest.name, closest.frequency_hz, cents_off(freq, closest.frequency_hz)
