#!/usr/bin/env python3
"""
Verification tools for pulse tap tables.
"""

import numpy as np
from scipy import signal
import matplotlib.pyplot as plt
from typing import Dict, Any

from .errors import ConfigurationError
from .pulse import check_pulse_params

# Response at the symbol-rate Nyquist frequency 1/(2·Ns), relative to DC
RC_NYQUIST_DB = 20 * np.log10(0.5)
RRC_NYQUIST_DB = 20 * np.log10(np.sqrt(0.5))


def expected_nyquist_db(kind: str, rolloff: float) -> float:
    """
    Ideal gain at 1/(2·Ns) relative to DC.

    RC and sinc cross one half there; RRC crosses its square root. With
    B = 0 the RRC is an ideal low-pass whose truncated response settles on
    the midpoint of the band-edge jump, which is also one half.
    """
    if kind not in ('sinc', 'rc', 'rrc'):
        raise ConfigurationError(f"Unsupported pulse kind: {kind}")
    if kind == 'rrc' and rolloff > 0:
        return RRC_NYQUIST_DB
    return RC_NYQUIST_DB


def verify_pulse_response(
    taps: np.ndarray,
    samples_per_symbol: float,
    rolloff: float,
    kind: str = 'rc',
    nyquist_tolerance_db: float = 0.1,
    plot: bool = False
) -> Dict[str, Any]:
    """
    Check a tap table's frequency response against the ideal pulse spectrum.

    Parameters
    ----------
    taps : np.ndarray
        Filter coefficients
    samples_per_symbol : float
        Samples per symbol Ns the taps were generated with
    rolloff : float
        Rolloff factor B the taps were generated with
    kind : str
        'sinc', 'rc' or 'rrc'
    nyquist_tolerance_db : float
        Allowed deviation from the ideal gain at 1/(2·Ns)
    plot : bool
        Whether to plot impulse and magnitude response

    Returns
    -------
    dict
        Verification results. Frequencies are in cycles per sample.
    """
    taps = np.asarray(taps, dtype=np.float64)
    B, Ns = check_pulse_params(rolloff, samples_per_symbol)
    expected_db = expected_nyquist_db(kind, B)

    dc_gain = abs(np.sum(taps))
    if dc_gain <= 1e-300:
        raise ConfigurationError("Taps have zero DC gain, cannot reference the response")

    w, h = signal.freqz(taps, worN=8192)
    freq = w / (2 * np.pi)
    mag_db = 20 * np.log10(np.abs(h) / dc_gain + 1e-300)

    # Exact band-edge point rather than the nearest grid bin
    f_nyq = 1.0 / (2.0 * Ns)
    _, h_nyq = signal.freqz(taps, worN=[2 * np.pi * f_nyq])
    nyquist_gain_db = 20 * np.log10(np.abs(h_nyq[0]) / dc_gain + 1e-300)

    occupied = (1.0 + B) / (2.0 * Ns)
    stopband = freq > 1.25 * occupied
    stopband_peak_db = float(np.max(mag_db[stopband])) if stopband.any() else -np.inf

    results = {
        'dc_gain': float(dc_gain),
        'nyquist_frequency': f_nyq,
        'nyquist_gain_db': float(nyquist_gain_db),
        'expected_nyquist_db': float(expected_db),
        'occupied_bandwidth': occupied,
        'stopband_peak_db': stopband_peak_db,
        'meets_nyquist': bool(abs(nyquist_gain_db - expected_db) <= nyquist_tolerance_db),
    }

    if plot:
        fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(10, 8))

        center = len(taps) // 2
        n = np.arange(-center, len(taps) - center) / Ns
        ax1.plot(n, taps, marker='.')
        ax1.set_xlabel('Offset (symbols)')
        ax1.set_ylabel('Amplitude')
        ax1.set_title(f'{kind.upper()} Impulse Response')
        ax1.grid(True, alpha=0.3)

        ax2.plot(freq, mag_db)
        ax2.axvline(f_nyq, color='g', linestyle='--', label=f'1/(2Ns): {nyquist_gain_db:.2f} dB')
        ax2.axvline(occupied, color='r', linestyle='--', label=f'(1+B)/(2Ns) = {occupied:.4f}')
        ax2.set_xlabel('Frequency (cycles/sample)')
        ax2.set_ylabel('Magnitude re DC (dB)')
        ax2.set_title('Frequency Response')
        ax2.grid(True, alpha=0.3)
        ax2.legend()
        ax2.set_ylim(-120, 5)

        plt.tight_layout()
        plt.show()

    return results


def matched_cascade_error(
    rrc_taps: np.ndarray,
    rc_taps: np.ndarray,
    samples_per_symbol: float
) -> float:
    """
    Largest deviation of the RRC self-convolution from the RC response.

    Both tables must share one odd length and centre. The cascade is scaled
    by Ns and compared over the central half of the table, away from the
    truncated edges.
    """
    rrc = np.asarray(rrc_taps, dtype=np.float64)
    rc = np.asarray(rc_taps, dtype=np.float64)
    if rrc.ndim != 1 or rrc.shape != rc.shape or len(rc) % 2 == 0:
        raise ConfigurationError(
            f"Tables must be 1-D with one odd length, got {rrc.shape} and {rc.shape}")
    _, Ns = check_pulse_params(0.0, samples_per_symbol)

    n = len(rc)
    half = n // 2
    cascade = np.convolve(rrc, rrc) * Ns
    aligned = cascade[half:half + n]

    quarter = n // 4
    mid = slice(half - quarter, half + quarter + 1)
    return float(np.max(np.abs(aligned[mid] - rc[mid])))
