#!/usr/bin/env python3
"""
Tests for frequency-response and matched-cascade verification.
"""

import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from pywireless import ConfigurationError, rcosine, sqrtrcosine
from pywireless import verification


def grid(span, sps):
    half = span * sps // 2
    return np.arange(-half, half + 1, dtype=np.float64)


def test_expected_nyquist_levels():
    assert verification.expected_nyquist_db('rc', 0.35) == pytest.approx(-6.0206, abs=1e-4)
    assert verification.expected_nyquist_db('rrc', 0.35) == pytest.approx(-3.0103, abs=1e-4)
    assert verification.expected_nyquist_db('rrc', 0.0) == pytest.approx(-6.0206, abs=1e-4)
    with pytest.raises(ConfigurationError):
        verification.expected_nyquist_db('gaussian', 0.35)


def test_rc_response_crosses_half_at_symbol_nyquist():
    taps = rcosine(grid(32, 8), 0.5, 8)
    results = verification.verify_pulse_response(taps, 8, 0.5, kind='rc')
    assert results['meets_nyquist']
    assert results['nyquist_gain_db'] == pytest.approx(-6.02, abs=0.1)
    assert results['nyquist_frequency'] == pytest.approx(1 / 16)
    assert results['occupied_bandwidth'] == pytest.approx(1.5 / 16)
    assert results['stopband_peak_db'] < -30
    assert results['dc_gain'] == pytest.approx(8.0, rel=1e-2)


def test_rrc_response_crosses_root_half_at_symbol_nyquist():
    taps = sqrtrcosine(grid(32, 8), 0.35, 8)
    results = verification.verify_pulse_response(taps, 8, 0.35, kind='rrc')
    assert results['meets_nyquist']
    assert results['nyquist_gain_db'] == pytest.approx(-3.01, abs=0.1)
    assert results['dc_gain'] == pytest.approx(1.0, rel=1e-2)


def test_wrong_kind_fails_nyquist_check():
    taps = sqrtrcosine(grid(32, 8), 0.35, 8)
    results = verification.verify_pulse_response(taps, 8, 0.35, kind='rc')
    assert not results['meets_nyquist']


def test_zero_dc_gain_raises():
    with pytest.raises(ConfigurationError):
        verification.verify_pulse_response(np.array([1.0, 0.0, -1.0]), 4, 0.35)


def test_invalid_parameters_raise():
    taps = rcosine(grid(8, 4), 0.35, 4)
    with pytest.raises(ConfigurationError):
        verification.verify_pulse_response(taps, 4, 1.5)
    with pytest.raises(ConfigurationError):
        verification.verify_pulse_response(taps, 0, 0.35)


def test_plot_draws_without_error(monkeypatch):
    plt = verification.plt
    plt.switch_backend('Agg')
    monkeypatch.setattr(plt, 'show', lambda: None)
    taps = rcosine(grid(8, 4), 0.35, 4)
    results = verification.verify_pulse_response(taps, 4, 0.35, plot=True)
    assert 'nyquist_gain_db' in results
    plt.close('all')


@pytest.mark.parametrize("B", [0.25, 0.35, 0.5, 1.0])
def test_rrc_cascade_reproduces_rc(B):
    n = grid(16, 8)
    error = verification.matched_cascade_error(sqrtrcosine(n, B, 8), rcosine(n, B, 8), 8)
    assert error < 1e-2


def test_cascade_of_rc_is_not_rc():
    n = grid(16, 8)
    rc = rcosine(n, 0.35, 8)
    assert verification.matched_cascade_error(rc, rc, 8) > 0.1


@pytest.mark.parametrize("a, b", [
    (np.ones(5), np.ones(7)),
    (np.ones(6), np.ones(6)),
    (np.ones((3, 3)), np.ones((3, 3))),
])
def test_cascade_shape_mismatch_raises(a, b):
    with pytest.raises(ConfigurationError):
        verification.matched_cascade_error(a, b, 4)
