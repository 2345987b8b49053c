"""Aitchison simplex geometry for the source-proportion ILR transform.

The sampler parameterizes source proportions in isometric log-ratio (ILR)
coordinates and maps them back to the simplex with a fixed orthonormal basis
``e`` (Egozcue et al. 2003, eq. 18). The basis is built here and passed to
the sampler as constant data; ``ilr`` and ``inverse_ilr`` reproduce the same
transforms in numpy.
"""

import math

import numpy as np


def closure(values: np.ndarray, axis: int = -1) -> np.ndarray:
    """Rescale positive parts so they sum to one along ``axis``."""
    arr = np.asarray(values, dtype=float)
    return arr / arr.sum(axis=axis, keepdims=True)


def clr(values: np.ndarray) -> np.ndarray:
    """Centred log-ratio of a composition (last axis)."""
    logs = np.log(np.asarray(values, dtype=float))
    return logs - logs.mean(axis=-1, keepdims=True)


def orthonormal_basis(n_sources: int) -> np.ndarray:
    """Build the ``n_sources x (n_sources - 1)`` Aitchison-orthonormal basis.

    Column ``i`` (1-based) is the closure of ``exp`` applied to a balance
    vector whose first ``i`` entries are ``sqrt(1/(i(i+1)))``, whose entry
    ``i+1`` is ``-sqrt(i/(i+1))`` and whose remaining entries are zero.
    Every column is strictly positive and sums to one.
    """
    if n_sources < 2:
        raise ValueError("orthonormal basis requires at least 2 sources.")

    e = np.zeros((n_sources, n_sources - 1))
    for i in range(1, n_sources):
        balance = np.zeros(n_sources)
        balance[:i] = math.sqrt(1.0 / (i * (i + 1)))
        balance[i] = -math.sqrt(i / (i + 1))
        column = np.exp(balance)
        e[:, i - 1] = column / column.sum()
    return e


def _contrast_matrix(e: np.ndarray) -> np.ndarray:
    # clr of each basis column; columns are orthonormal in R^n
    return clr(np.asarray(e, dtype=float).T).T


def ilr(p: np.ndarray, e: np.ndarray) -> np.ndarray:
    """ILR coordinates of composition(s) ``p`` in basis ``e``."""
    return clr(p) @ _contrast_matrix(e)


def inverse_ilr(x: np.ndarray, e: np.ndarray) -> np.ndarray:
    """Map ILR coordinates back to the simplex.

    Mirrors the sampler's calculation: each basis column is raised to its
    coordinate and closed, the per-source products are taken across columns
    and the result is closed again.
    """
    coords = np.asarray(x, dtype=float)
    basis = np.asarray(e, dtype=float)
    # cross[..., src, j] = C(e[:, j] ** x_j)[src]
    cross = closure(basis ** coords[..., np.newaxis, :], axis=-2)
    tmp_p = np.prod(cross, axis=-1)
    return closure(tmp_p)
