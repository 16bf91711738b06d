"""
Benchmark for the autocorrelation pitch detector.

THE IDEA:
  1. Generate plucked-string frames with known frequencies (synth.py)
  2. Run the detector on each frame
  3. Measure how often it finds a pitch, and how far off it is in cents

WHAT IS CENT ERROR?
  Musicians measure pitch accuracy in "cents". 100 cents = 1 semitone.
  Cent error = 1200 * |log2(predicted/actual)|
  Under 5 cents is what the tuner reports as "in tune", so a detector whose
  typical error is well below that is good enough for the job.

OCTAVE ERRORS
  Without a locked target the detector can land an octave off (1200 cents).
  Those frames are counted separately so they don't drown the mean.

Run with:  gtuner-benchmark  (or python -m gtuner.benchmark)
"""

import argparse

import numpy as np

from gtuner.config import BENCHMARK_SAMPLES, FRAME_SIZE, SAMPLE_RATE
from gtuner.pitch import AutocorrelationDetector
from gtuner.synth import generate_dataset

# Anything further off than this is an octave (or harmonic) error
OCTAVE_ERROR_CENTS = 600.0


def hz_to_cents(predicted, target):
    """Convert Hz difference to cents (musical pitch unit)."""
    predicted = np.clip(predicted, 1e-7, None)
    target = np.clip(target, 1e-7, None)
    return 1200 * np.abs(np.log2(predicted / target))


def run_benchmark(n_samples=BENCHMARK_SAMPLES, frame_size=FRAME_SIZE, seed=0):
    """
    Evaluate the detector on a synthetic dataset.

    Returns:
        dict with detection_rate, octave_errors, mean_cents and median_cents.
        The cents figures only cover detected frames without octave errors
        (NaN if there are none).
    """
    signals, frequencies = generate_dataset(n_samples=n_samples, frame_size=frame_size, seed=seed)
    detector = AutocorrelationDetector(SAMPLE_RATE)

    predicted = []
    actual = []
    for signal, f0 in zip(signals, frequencies):
        estimate = detector.detect(signal)
        if estimate:
            predicted.append(estimate.frequency_hz)
            actual.append(f0)

    errors = hz_to_cents(np.array(predicted), np.array(actual)) if predicted else np.array([])
    octave_errors = int(np.sum(errors > OCTAVE_ERROR_CENTS))
    close = errors[errors <= OCTAVE_ERROR_CENTS]

    return {
        "samples": len(signals),
        "detection_rate": len(predicted) / len(signals) if signals else 0.0,
        "octave_errors": octave_errors,
        "mean_cents": float(np.mean(close)) if close.size else float("nan"),
        "median_cents": float(np.median(close)) if close.size else float("nan"),
    }


def main(argv=None):
    parser = argparse.ArgumentParser(description="Benchmark the pitch detector on synthetic plucked strings")
    parser.add_argument("-n", "--samples", type=int, default=BENCHMARK_SAMPLES, help="Number of synthetic frames")
    parser.add_argument("--frame-size", type=int, default=FRAME_SIZE, help="Samples per frame")
    parser.add_argument("--seed", type=int, default=0, help="Random seed for the dataset")
    args = parser.parse_args(argv)

    print(f"Generating {args.samples} synthetic frames of {args.frame_size} samples...")
    report = run_benchmark(args.samples, args.frame_size, args.seed)

    print(f"  Detection rate: {report['detection_rate']:.1%}")
    print(f"  Octave errors:  {report['octave_errors']}")
    print(f"  Mean cents error:   {report['mean_cents']:.2f}")
    print(f"  Median cents error: {report['median_cents']:.2f}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
