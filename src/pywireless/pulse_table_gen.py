#!/usr/bin/env python3
"""
Pulse Tap Table Generator
=========================

Samples one of the pulse-shaping kernels on a symmetric integer grid:
- Odd length 2·L + 1 with L = span·Ns // 2, centred on n = 0
- Generates only the right half and mirrors it for exact symmetry
- Optional peak, energy or DC normalization
- Verification of symmetry, zero ISI and matched-filter cascade

Example:
    python -m pywireless.pulse_table_gen --kind rrc --span 8 --sps 4 \
        --rolloff 0.35 --verify
"""

import argparse
import logging
import sys
import time
from dataclasses import dataclass, asdict
from typing import Callable, Optional, Tuple, Dict, Any

import numpy as np

from .errors import ConfigurationError
from .pulse import sinc, rcosine, sqrtrcosine, check_pulse_params
from .verification import matched_cascade_error, verify_pulse_response

KINDS = ('sinc', 'rc', 'rrc')
NORMALIZATIONS = ('none', 'peak', 'energy', 'dc')

# RRC cascade check applies only above these span and rolloff floors
CASCADE_MIN_SPAN = 8
CASCADE_MIN_ROLLOFF = 0.2
CASCADE_TOLERANCE = 1e-2


@dataclass
class PulseSpec:
    """Complete description of a pulse tap table."""
    kind: str  # 'sinc', 'rc' or 'rrc'
    span_in_symbols: int
    samples_per_symbol: int
    rolloff: float = 0.35
    normalize: str = 'none'  # 'none', 'peak', 'energy' or 'dc'

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'PulseSpec':
        return cls(**d)


def pulse_kernel(kind: str) -> Callable[[np.ndarray, float, float], np.ndarray]:
    """Return the kernel for a kind name as f(x, rolloff, samples_per_symbol)."""
    if kind == 'sinc':
        return lambda x, rolloff, sps: sinc(np.asarray(x, dtype=np.float64) / sps)
    elif kind == 'rc':
        return rcosine
    elif kind == 'rrc':
        return sqrtrcosine
    raise ConfigurationError(f"Unsupported pulse kind: {kind}")


def _check_spec(spec: PulseSpec) -> None:
    if spec.kind not in KINDS:
        raise ConfigurationError(f"Unsupported pulse kind: {spec.kind}")
    if spec.normalize not in NORMALIZATIONS:
        raise ConfigurationError(f"Unsupported normalization: {spec.normalize}")
    if int(spec.span_in_symbols) != spec.span_in_symbols or spec.span_in_symbols < 1:
        raise ConfigurationError(
            f"span_in_symbols must be an integer >= 1, got {spec.span_in_symbols}")
    if int(spec.samples_per_symbol) != spec.samples_per_symbol or spec.samples_per_symbol < 1:
        raise ConfigurationError(
            f"samples_per_symbol must be an integer >= 1, got {spec.samples_per_symbol}")
    check_pulse_params(spec.rolloff, spec.samples_per_symbol)


def generate_pulse_table(
    spec: PulseSpec,
    log: Optional[logging.Logger] = None
) -> Tuple[np.ndarray, Dict[str, Any]]:
    """
    Even-symmetric pulse tap table.

    Parameters:
    -----------
    spec : PulseSpec
        Kind, span, oversampling, rolloff and normalization
    log : Logger
        Optional logger

    Returns:
    --------
    table : np.ndarray
        Shape (2·L + 1,) with L = span_in_symbols·samples_per_symbol // 2
    metadata : dict
        Generation metadata
    """
    if log is None:
        log = logging.getLogger(__name__)

    _check_spec(spec)

    t0 = time.perf_counter()

    sps = int(spec.samples_per_symbol)
    half = int(spec.span_in_symbols) * sps // 2
    table_length = 2 * half + 1

    log.info("Generating %s pulse table:", spec.kind)
    log.info("  Span: %d symbols", spec.span_in_symbols)
    log.info("  Samples per symbol: %d", sps)
    if spec.kind != 'sinc':
        log.info("  Rolloff: %.4f", spec.rolloff)
    log.info("  Table size: %d samples", table_length)

    # 1. Right half including centre, then mirror
    n = np.arange(half + 1, dtype=np.float64)
    kernel_right = pulse_kernel(spec.kind)(n, spec.rolloff, sps)
    table = np.concatenate((kernel_right[:0:-1], kernel_right))
    center = half

    # 2. Normalization
    if spec.normalize == 'peak':
        factor = table[center]
    elif spec.normalize == 'energy':
        factor = np.sqrt(np.sum(table ** 2))
    elif spec.normalize == 'dc':
        factor = np.sum(table)
    else:
        factor = 1.0

    if abs(factor) > 1e-12:
        table = table / factor
        if spec.normalize != 'none':
            log.info("Normalized (%s) by factor %.15e", spec.normalize, factor)
    else:
        log.warning("%s normalizer %.2e below threshold 1e-12, leaving table unnormalized",
                    spec.normalize, abs(factor))
        factor = 1.0

    gen_time = time.perf_counter() - t0

    symmetry_error = np.max(np.abs(table[:center] - table[center + 1:][::-1])) if center else 0.0
    max_isi = _max_isi(table, center, sps)

    log.info("Table generated in %.3f seconds", gen_time)
    log.debug("Symmetry error: %.2e, max ISI: %.2e", symmetry_error, max_isi)

    metadata = spec.to_dict()
    metadata.update({
        'table_size': table_length,
        'center_index': center,
        'normalization_factor': float(factor),
        'symmetry_error': float(symmetry_error),
        'max_isi': float(max_isi),
        'generation_time': gen_time,
        'generator_version': 'mirrored',
    })

    return table.astype(np.float64), metadata


def _max_isi(table: np.ndarray, center: int, sps: int) -> float:
    """Largest tap at a nonzero symbol multiple, relative to the centre tap."""
    offsets = np.arange(sps, center + 1, sps)
    if offsets.size == 0 or table[center] == 0:
        return 0.0
    isi = np.concatenate((table[center - offsets], table[center + offsets]))
    return float(np.max(np.abs(isi)) / abs(table[center]))


def verify_pulse_table(
    table: np.ndarray,
    metadata: Dict[str, Any],
    log: Optional[logging.Logger] = None
) -> bool:
    """Run the automated checks on a generated table."""
    if log is None:
        log = logging.getLogger(__name__)

    log.info("Running pulse table verification...")
    all_pass = True
    center = metadata['center_index']

    # Test 1: Finite
    finite_pass = bool(np.all(np.isfinite(table)))
    log.info("Test 1 - Finite taps: %s", "PASS" if finite_pass else "FAIL")
    all_pass &= finite_pass

    # Test 2: Exact symmetry
    symmetry_error = np.max(np.abs(table - table[::-1]))
    symmetry_pass = symmetry_error == 0.0
    log.info("Test 2 - Symmetry: %s (error: %.2e)",
             "PASS" if symmetry_pass else "FAIL", symmetry_error)
    all_pass &= symmetry_pass

    # Test 3: Peak at centre
    peak_idx = int(np.argmax(np.abs(table)))
    peak_pass = peak_idx == center
    log.info("Test 3 - Peak position: %s (at index %d, center %d)",
             "PASS" if peak_pass else "FAIL", peak_idx, center)
    all_pass &= peak_pass

    # Test 4: Energy
    energy = np.sum(table ** 2)
    energy_pass = bool(np.isfinite(energy) and energy > 0)
    log.info("Test 4 - Energy: %s (energy: %.6e)", "PASS" if energy_pass else "FAIL", energy)
    all_pass &= energy_pass

    # Test 5: Nyquist property for sinc/rc, matched cascade for rrc
    sps = int(metadata['samples_per_symbol'])
    if metadata['kind'] in ('sinc', 'rc'):
        max_isi = _max_isi(table, center, sps)
        isi_pass = max_isi < 1e-12
        log.info("Test 5 - Zero ISI: %s (max: %.2e, threshold: 1e-12)",
                 "PASS" if isi_pass else "FAIL", max_isi)
        all_pass &= isi_pass
    elif (metadata['span_in_symbols'] >= CASCADE_MIN_SPAN
          and metadata['rolloff'] >= CASCADE_MIN_ROLLOFF):
        raw = table * metadata['normalization_factor']
        n = np.arange(-center, center + 1, dtype=np.float64)
        rc = rcosine(n, metadata['rolloff'], sps)
        cascade_error = matched_cascade_error(raw, rc, sps)
        cascade_pass = cascade_error < CASCADE_TOLERANCE
        log.info("Test 5 - Matched cascade: %s (error: %.2e, threshold: %.0e)",
                 "PASS" if cascade_pass else "FAIL", cascade_error, CASCADE_TOLERANCE)
        all_pass &= cascade_pass
    else:
        log.info("Test 5 - Matched cascade: skipped (span < %d or rolloff < %.1f)",
                 CASCADE_MIN_SPAN, CASCADE_MIN_ROLLOFF)

    if all_pass:
        log.info("All verification tests PASSED")
    else:
        log.error("Some verification tests FAILED")

    return bool(all_pass)


def save_pulse_table(
    table: np.ndarray,
    metadata: Dict[str, Any],
    basename: str,
    save_format: str,
    log: Optional[logging.Logger] = None
) -> None:
    """Save pulse table with metadata."""
    if log is None:
        log = logging.getLogger(__name__)

    if save_format in ['npy', 'all']:
        npy_path = f"{basename}.npy"
        np.save(npy_path, table.astype(np.float64))
        log.info("Saved float64 table to %s", npy_path)

    if save_format in ['txt', 'all']:
        txt_path = f"{basename}.txt"
        np.savetxt(txt_path, table, fmt="%.18e")
        log.info("Saved text table to %s", txt_path)

    if save_format in ['npz', 'all']:
        npz_path = f"{basename}.npz"

        save_metadata = metadata.copy()
        save_metadata['command_line'] = ' '.join(sys.argv)
        save_metadata['numpy_version'] = np.__version__

        np.savez(npz_path, table=table.astype(np.float64), metadata=save_metadata)
        log.info("Saved table and metadata to %s", npz_path)


def default_basename(spec: PulseSpec) -> str:
    parts = [spec.kind, f"{spec.span_in_symbols}s", f"{spec.samples_per_symbol}x"]
    if spec.kind != 'sinc':
        parts.append(f"r{spec.rolloff:.2f}".replace('.', '_'))
    if spec.normalize != 'none':
        parts.append(spec.normalize)
    return '_'.join(parts)


def main():
    parser = argparse.ArgumentParser(
        description="Pulse-shaping tap table generator (sinc, raised cosine, root raised cosine)",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument('--kind', '-k', choices=KINDS, default='rrc',
                        help='Pulse shape (default: rrc)')
    parser.add_argument('--span', '-s', type=int, default=8,
                        help='Filter span in symbols (default: 8)')
    parser.add_argument('--sps', '-n', type=int, default=4,
                        help='Samples per symbol (default: 4)')
    parser.add_argument('--rolloff', '-r', type=float, default=0.35,
                        help='Rolloff factor in [0, 1] (default: 0.35, ignored for sinc)')
    parser.add_argument('--normalize', choices=NORMALIZATIONS, default='none',
                        help='Tap normalization (default: none, raw kernel values)')

    # Output options
    parser.add_argument('--format', '-f', choices=['npy', 'npz', 'txt', 'all'], default='npz')
    parser.add_argument('--basename', type=str)
    parser.add_argument('--verify', '-v', action='store_true')
    parser.add_argument('--plot', action='store_true',
                        help='Show impulse and magnitude response (requires a display)')
    parser.add_argument('--debug', '-d', action='store_true')
    parser.add_argument('--log-file', type=str,
                        help='Also write the log to this file')

    args = parser.parse_args()

    # Setup logging
    log_handlers = [logging.StreamHandler(sys.stderr)]
    if args.log_file:
        log_handlers.append(logging.FileHandler(args.log_file, mode='w'))
    logging.basicConfig(
        handlers=log_handlers,
        level=logging.DEBUG if args.debug else logging.INFO,
        format='%(levelname)s: %(message)s'
    )
    log = logging.getLogger('pulse_table')

    spec = PulseSpec(
        kind=args.kind,
        span_in_symbols=args.span,
        samples_per_symbol=args.sps,
        rolloff=args.rolloff,
        normalize=args.normalize,
    )

    table, metadata = generate_pulse_table(spec, log)

    if args.verify:
        if not verify_pulse_table(table, metadata, log):
            log.error("Verification FAILED!")
            sys.exit(1)

    if args.plot:
        verify_pulse_response(table, spec.samples_per_symbol, spec.rolloff,
                              kind=spec.kind, plot=True)

    basename = args.basename or default_basename(spec)
    save_pulse_table(table, metadata, basename, args.format, log)

    print(f"\nGenerated pulse table: {basename}")
    print(f"  Kind: {spec.kind}")
    print(f"  Size: {len(table)} samples")
    print(f"  Span: {spec.span_in_symbols} symbols at {spec.samples_per_symbol}x")
    print(f"  Symmetry error: {metadata['symmetry_error']:.2e}")


def run():
    try:
        main()
    except Exception as e:
        logging.error("Fatal: %s", e)
        logging.debug("Traceback:", exc_info=True)
        sys.exit(1)


if __name__ == '__main__':
    run()
