"""
Input-validation errors raised by the demand simulation pipeline.

All of them subclass ``ValueError`` so callers that already guard against bad
arguments keep working.
"""


class DemandSimulationError(ValueError):
    """Base class for pipeline input errors."""


class InvalidRangeError(DemandSimulationError):
    """Malformed date, inverted date range, or negative horizon."""


class EmptyHistoryError(DemandSimulationError):
    """A forecast was requested without any historical anchor."""


class InvalidFactorError(DemandSimulationError):
    """Safety stock factor is negative or not a number."""


class ConfigError(DemandSimulationError):
    """Run configuration is missing a key or holds an unusable value."""


__all__ = [
    "DemandSimulationError",
    "InvalidRangeError",
    "EmptyHistoryError",
    "InvalidFactorError",
    "ConfigError",
]
