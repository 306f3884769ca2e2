"""
pywireless - Pulse-shaping kernels for digital communications.
"""

from .errors import ConfigurationError
from .pulse import sinc, rcosine, sqrtrcosine, check_pulse_params, SINGULARITY_TOLERANCE
from .pulse_table_gen import (
    PulseSpec,
    generate_pulse_table,
    verify_pulse_table,
    save_pulse_table,
)
from .verification import verify_pulse_response, matched_cascade_error

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "sinc",
    "rcosine",
    "sqrtrcosine",
    "check_pulse_params",
    "SINGULARITY_TOLERANCE",
    "PulseSpec",
    "generate_pulse_table",
    "verify_pulse_table",
    "save_pulse_table",
    "verify_pulse_response",
    "matched_cascade_error",
]
