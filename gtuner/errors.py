"""
Exceptions raised by the tuner engine.

Only caller mistakes are exceptions. A frame with no usable pitch is a normal
outcome and comes back as a NoPitch estimate / LISTENING status instead.
"""


class TunerError(Exception):
    """Base class for all tuner engine errors."""


class InvalidSessionState(TunerError):
    """An operation was called in a session state that does not allow it
    (e.g. processing a frame before start() or after stop())."""


class InvalidFrame(TunerError, ValueError):
    """The audio frame handed to the engine is unusable: empty buffer,
    non 1-D samples, or a non-positive sample rate."""
