"""Exception types raised by the pulse core.

Content problems never raise (they degrade to safe defaults). Only
configuration misuse does, and it does so at the boundary.
"""


class PulseError(Exception):
    """Base class for pulse core errors."""


class PulseConfigError(PulseError, ValueError):
    """A tunable is outside its valid range (e.g. threshold > 1, min_cluster_size < 1)."""


def check_unit_interval(name: str, value: float) -> float:
    """Fail fast unless 0 <= value <= 1."""
    if not 0.0 <= value <= 1.0:
        raise PulseConfigError(f"{name} must be within [0, 1], got {value!r}")
    return value


def check_positive(name: str, value: float) -> float:
    if value <= 0:
        raise PulseConfigError(f"{name} must be > 0, got {value!r}")
    return value
