#!/usr/bin/env python3
"""
Pulse-Shaping Kernels
=====================

Closed-form impulse responses used to band-limit symbol streams:

- sinc:        normalized sin(πx)/(πx)
- rcosine:     raised cosine, zero ISI at every symbol multiple
- sqrtrcosine: square-root raised cosine, the matched-filter half of rcosine

Each kernel takes a vector of sample offsets and returns a float64 vector
of the same length. Offsets are divided by the samples-per-symbol factor Ns,
so x = k·Ns lands on the k-th symbol. The 0/0 points of the closed forms are
replaced by their analytic limits; no valid input produces NaN or Inf.
"""

import numpy as np
from typing import Tuple

from .errors import ConfigurationError

# Absolute window on |2Bt| - 1 (rcosine) and |4Bt| - 1 (sqrtrcosine) inside
# which the analytic limit replaces the general formula.
SINGULARITY_TOLERANCE = float(np.sqrt(np.finfo(np.float64).eps))


def _as_samples(x) -> np.ndarray:
    return np.atleast_1d(np.asarray(x, dtype=np.float64))


def _single_value(value, name: str) -> float:
    try:
        arr = np.asarray(value, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{name} must be a real number, got {value!r}") from e

    if arr.size != 1:
        raise ConfigurationError(
            f"{name} must be a single value, got {arr.size} values "
            "(per-sample parameters are not supported)"
        )
    return float(arr.reshape(-1)[0])


def check_pulse_params(rolloff, samples_per_symbol) -> Tuple[float, float]:
    """
    Validate and unwrap the filter-wide pulse parameters.

    Parameters
    ----------
    rolloff : float or length-1 sequence
        Rolloff factor B, must lie in [0, 1]
    samples_per_symbol : float or length-1 sequence
        Oversampling factor Ns, must be positive and finite

    Returns
    -------
    (B, Ns) : tuple of float

    Raises
    ------
    ConfigurationError
        If either parameter is out of range or holds more than one value
    """
    B = _single_value(rolloff, "rolloff")
    Ns = _single_value(samples_per_symbol, "samples_per_symbol")

    # NaN fails both comparisons
    if not 0.0 <= B <= 1.0:
        raise ConfigurationError(f"rolloff must lie in [0, 1], got {B}")
    if not (np.isfinite(Ns) and Ns > 0):
        raise ConfigurationError(f"samples_per_symbol must be positive and finite, got {Ns}")

    return B, Ns


def sinc(x) -> np.ndarray:
    """
    Normalized sinc, sin(πx)/(πx) with sinc(0) = 1.

    Evaluated on |x| so the result is exactly even, and set to exactly zero
    at nonzero integers where sin(πn) leaves a ~1e-17 residue.
    """
    x = np.abs(_as_samples(x))
    y = np.sinc(x)
    y[(x != 0) & (x == np.floor(x))] = 0.0
    return y


def rcosine(x, rolloff, samples_per_symbol) -> np.ndarray:
    """
    Raised-cosine impulse response.

    With t = |x|/Ns:

        h(t) = sinc(t) · cos(πBt) / (1 − (2Bt)²)

    h(0) = 1, and at |2Bt| = 1 the limit (π/4)·sinc(1/(2B)) is used.
    B = 0 reduces to sinc(t).

    Parameters
    ----------
    x : array_like
        Sample offsets
    rolloff : float
        Rolloff factor B in [0, 1]
    samples_per_symbol : float
        Samples per symbol Ns > 0

    Returns
    -------
    np.ndarray
        Tap amplitudes, same length as x
    """
    B, Ns = check_pulse_params(rolloff, samples_per_symbol)
    t = np.abs(_as_samples(x)) / Ns

    if B == 0.0:
        return sinc(t)

    u = 2.0 * B * t
    singular = np.abs(u - 1.0) < SINGULARITY_TOLERANCE

    with np.errstate(divide='ignore', invalid='ignore'):
        h = sinc(t) * np.cos(np.pi * B * t) / (1.0 - u ** 2)

    h[singular] = np.pi / 4 * sinc(1.0 / (2.0 * B))[0]
    return h


def sqrtrcosine(x, rolloff, samples_per_symbol) -> np.ndarray:
    """
    Square-root raised-cosine impulse response.

    With t = |x|/Ns:

        h(t) = (1/Ns) · [sin(πt(1−B)) + 4Bt·cos(πt(1+B))] / [πt(1 − (4Bt)²)]

    Limits:
        t = 0:        (1/Ns)·(1 − B + 4B/π)
        |4Bt| = 1:    (1/Ns)·(B/√2)·[(1 + 2/π)·sin(π/(4B)) + (1 − 2/π)·cos(π/(4B))]

    B = 0 is the unshaped low-pass case sinc(t)/Ns. Convolving the sampled
    response with itself and scaling by Ns reproduces rcosine.
    """
    B, Ns = check_pulse_params(rolloff, samples_per_symbol)
    t = np.abs(_as_samples(x)) / Ns

    if B == 0.0:
        return sinc(t) / Ns

    u = 4.0 * B * t
    at_zero = t == 0
    singular = np.abs(u - 1.0) < SINGULARITY_TOLERANCE

    with np.errstate(divide='ignore', invalid='ignore'):
        num = np.sin(np.pi * t * (1.0 - B)) + u * np.cos(np.pi * t * (1.0 + B))
        h = num / (np.pi * t * (1.0 - u ** 2))

    h[at_zero] = 1.0 - B + 4.0 * B / np.pi
    h[singular] = B / np.sqrt(2) * (
        (1 + 2 / np.pi) * np.sin(np.pi / (4 * B))
        + (1 - 2 / np.pi) * np.cos(np.pi / (4 * B))
    )
    return h / Ns
