"""
Tests for gtuner/benchmark.py — cents error metric and synthetic benchmark.
"""

import math

import numpy as np
import pytest

from gtuner.benchmark import hz_to_cents, main, run_benchmark


class TestHzToCents:
    def test_octave(self):
        assert hz_to_cents(220.0, 110.0) == pytest.approx(1200.0)

    def test_symmetric(self):
        assert hz_to_cents(110.0, 220.0) == pytest.approx(1200.0)

    def test_vectorized(self):
        errors = hz_to_cents(np.array([110.0, 116.54]), np.array([110.0, 110.0]))
        assert errors[0] == 0.0
        assert errors[1] == pytest.approx(100.0, abs=0.1)

    def test_zero_is_clipped(self):
        assert math.isfinite(hz_to_cents(0.0, 110.0))


class TestRunBenchmark:
    def test_report(self):
        report = run_benchmark(n_samples=20, seed=1)
        assert report["samples"] == 20
        assert 0.0 <= report["detection_rate"] <= 1.0
        assert report["detection_rate"] > 0.8
        assert report["mean_cents"] < 10.0

    def test_cli(self, capsys):
        assert main(["-n", "5", "--seed", "2"]) == 0
        out = capsys.readouterr().out
        assert "Detection rate" in out
        assert "Median cents error" in out
