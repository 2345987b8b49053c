"""Dirichlet prior on the global source proportions."""

import numbers
from typing import Sequence, Union

import numpy as np

from .errors import InvalidPriorError, PriorLengthError, ZeroAlphaError

UNINFORMATIVE_ALPHA = 1


def _is_uninformative(value: object) -> bool:
    # 1, 1.0, [1] and a one-element array all select the flat prior
    try:
        single = np.asarray(value)
    except (TypeError, ValueError):
        return False
    return single.size == 1 and _is_number(single) and single.item() == UNINFORMATIVE_ALPHA


def resolve_prior(alpha_prior: Union[float, Sequence[float]], n_sources: int) -> np.ndarray:
    """Validate ``alpha_prior`` and return it as a length ``n_sources`` vector.

    A single 1 (scalar or one-element vector) is the uninformative prior and
    expands to ``n_sources`` ones. Any other value must be a numeric vector with one strictly positive entry
    per source.
    """
    if _is_uninformative(alpha_prior):
        return np.ones(n_sources, dtype=float)

    try:
        alpha = np.asarray(alpha_prior)
    except (TypeError, ValueError):
        alpha = None
    if alpha is None or alpha.dtype == bool or not np.issubdtype(alpha.dtype, np.number):
        raise InvalidPriorError(
            "Your prior is not a numeric vector of length n_sources. "
            f"For example, {[1] * n_sources} is a valid (uninformative) prior "
            f"for {n_sources} sources."
        )
    alpha = np.atleast_1d(alpha).astype(float)
    if alpha.ndim != 1:
        raise InvalidPriorError("Your prior must be a one-dimensional vector.")

    if alpha.size != n_sources:
        raise PriorLengthError(
            f"Length of your prior ({alpha.size}) does not match the number of sources "
            f"({n_sources}).",
            context={"length": alpha.size, "n_sources": n_sources},
        )
    if np.any(alpha == 0):
        raise ZeroAlphaError("You cannot set any alpha = 0. Instead, set it to 0.01.")
    if not np.all(np.isfinite(alpha)) or np.any(alpha < 0):
        raise InvalidPriorError("All alpha values must be finite and positive.")
    return alpha


def _is_number(value: object) -> bool:
    if isinstance(value, np.ndarray):
        return value.dtype != bool and np.issubdtype(value.dtype, np.number)
    return isinstance(value, (numbers.Number, np.number)) and not isinstance(value, (bool, np.bool_))
