"""Error hierarchy for isomix."""

from typing import Any, Mapping, Optional


class IsomixError(ValueError):
    """Base exception for invalid mixing-model inputs."""

    def __init__(self, message: str, *, context: Optional[Mapping[str, Any]] = None) -> None:
        super().__init__(message)
        self.context = dict(context) if context else {}


class ConfigError(IsomixError):
    """MCMC run configuration is neither a valid record nor a known preset."""


class InvalidPriorError(IsomixError):
    """Dirichlet prior is not a numeric vector of positive values."""


class PriorLengthError(IsomixError):
    """Dirichlet prior length does not match the number of sources."""


class ZeroAlphaError(IsomixError):
    """Dirichlet prior contains an entry equal to zero."""


class UnknownErrorStructureError(IsomixError):
    """Model file does not declare a recognized error structure."""


class DegenerateScaleError(IsomixError):
    """Pooled tracer standard deviation is zero or undefined."""


class DataShapeError(IsomixError):
    """Mixture, source or discrimination arrays have inconsistent shapes."""


__all__ = [
    "IsomixError",
    "ConfigError",
    "InvalidPriorError",
    "PriorLengthError",
    "ZeroAlphaError",
    "UnknownErrorStructureError",
    "DegenerateScaleError",
    "DataShapeError",
]
