"""
Replay a recording through the tuner, frame by frame.

Run with:  gtuner-replay guitar.wav --target A2

Stands in for both ends of a live tuner: the recording is the audio source
(sliced into fixed-size frames at its native sample rate, never resampled)
and the terminal is the display. Each printed line is what a tuner UI would
have shown for that frame.
"""

import argparse
import logging
import sys
from pathlib import Path

import librosa

from gtuner.config import AUTO_NAME, FRAME_SIZE, STANDARD_TUNING
from gtuner.notes import target_from_name
from gtuner.session import TunerSession
from gtuner.synth import frames
from gtuner.types import Status

logger = logging.getLogger(__name__)


def describe(status):
    """One display line for a TuningStatus."""
    if status.status is Status.LISTENING:
        return f"{status.display_name:>4}  {status.message}"
    return (
        f"{status.display_name:>4}  {status.note_name:<4} {status.frequency_hz:7.2f} Hz  "
        f"{status.rounded_cents:+4d} cents  conf={status.confidence:.2f}  "
        f"{status.message} ({status.direction})"
    )


def replay(audio, sample_rate, target=AUTO_NAME, frame_size=FRAME_SIZE):
    """
    Feed a whole signal through one tuner session.

    Returns:
        List of TuningStatus, one per complete frame.
    """
    with TunerSession(target=target) as session:
        return [session.process_frame(frame, sample_rate) for frame in frames(audio, frame_size)]


def _target_arg(value):
    try:
        return target_from_name(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def main(argv=None):
    parser = argparse.ArgumentParser(description="Replay a guitar recording through the tuner")
    parser.add_argument("path", type=str, help="Audio file (wav, flac, ogg, ...)")
    parser.add_argument(
        "--target",
        type=_target_arg,
        default=AUTO_NAME,
        help=f"String to lock onto: {AUTO_NAME}, " + ", ".join(STANDARD_TUNING),
    )
    parser.add_argument("--frame-size", type=int, default=FRAME_SIZE, help="Samples per frame")
    parser.add_argument("--every", type=int, default=1, help="Print every Nth frame")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    path = Path(args.path)
    if not path.is_file():
        print(f"Error: no such file: {path}", file=sys.stderr)
        return 1

    try:
        audio, sr = librosa.load(path, sr=None, mono=True)
    except Exception as e:
        print(f"Error: could not read {path}: {e}", file=sys.stderr)
        return 1

    logger.info("Loaded %s: %.2f s at %d Hz", path.name, len(audio) / sr, sr)

    results = replay(audio, sr, target=args.target, frame_size=args.frame_size)
    if not results:
        print(f"Recording is shorter than one frame ({args.frame_size} samples)")
        return 0

    for i, status in enumerate(results):
        if i % max(1, args.every) == 0:
            print(f"{i * args.frame_size / sr:7.2f}s  {describe(status)}")

    in_tune = sum(1 for s in results if s.status is Status.IN_TUNE)
    print(f"\n{len(results)} frames, {in_tune} in tune")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
