"""
Engine Exceptions

Degraded computations are reported as notices on the result, not raised.
Only broken setup (bad configuration) ends up here.
"""


class ProfitLensError(Exception):
    """Base exception for ProfitLens."""


class ConfigurationError(ProfitLensError):
    """Raised when settings cannot be used (e.g. unknown timezone name)."""
