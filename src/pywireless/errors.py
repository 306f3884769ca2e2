"""
Exceptions raised by pywireless.
"""


class ConfigurationError(ValueError):
    """
    Invalid pulse parameters.

    Raised before any computation when the rolloff factor is outside [0, 1],
    the samples-per-symbol value is not a positive finite number, or either
    parameter holds more than a single value.
    """
