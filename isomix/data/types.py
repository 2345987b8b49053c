"""Mixture, source and discrimination records."""

import numbers
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..errors import DataShapeError

DATA_TYPES = ("raw", "means")


@dataclass
class Factor:
    """A categorical covariate on the mixture samples.

    ``values`` holds 1-based level codes, one per mixture sample. ``lookup``
    is the nesting table handed to the sampler when this factor is nested
    within the other one.
    """

    levels: int
    values: np.ndarray
    re: bool = False
    lookup: Optional[np.ndarray] = None
    name: Optional[str] = None
    labels: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.values = np.asarray(self.values, dtype=int)
        if self.lookup is not None:
            self.lookup = np.asarray(self.lookup, dtype=int)
        if self.levels < 1:
            raise DataShapeError("factor must have at least one level.")
        if self.values.size and (self.values.min() < 1 or self.values.max() > self.levels):
            raise DataShapeError(
                f"factor '{self.name or '?'}' values must be level codes in 1..{self.levels}."
            )


@dataclass
class Mixture:
    data_iso: np.ndarray
    factors: List[Factor] = field(default_factory=list)
    fac_nested: Tuple[bool, bool] = (False, False)
    cont_effects: List[np.ndarray] = field(default_factory=list)
    iso_names: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        data = np.asarray(self.data_iso, dtype=float)
        if data.ndim == 1:
            data = data.reshape(-1, 1)
        if data.ndim != 2 or data.shape[0] == 0:
            raise DataShapeError("mixture data_iso must be an N x n_iso matrix.")
        self.data_iso = data
        if len(self.factors) > 2:
            raise DataShapeError("at most two mixture factors are supported.")
        for factor in self.factors:
            if factor.values.shape != (self.N,):
                raise DataShapeError(
                    f"factor '{factor.name or '?'}' must have one value per mixture sample."
                )
        self.fac_nested = (bool(self.fac_nested[0]), bool(self.fac_nested[1]))
        if self.n_effects == 2 and self.n_re == 1 and self.factors[0].re:
            # with one fixed and one random factor, factor 1 is the fixed one
            self.factors = [self.factors[1], self.factors[0]]
            self.fac_nested = (self.fac_nested[1], self.fac_nested[0])
        for index, nested in enumerate(self.fac_nested):
            if nested and (self.n_effects < 2 or self.factors[index].lookup is None):
                raise DataShapeError(
                    f"factor {index + 1} is marked nested but has no lookup table."
                )
        self.cont_effects = [np.asarray(ce, dtype=float).ravel() for ce in self.cont_effects]
        for ce in self.cont_effects:
            if ce.shape != (self.N,):
                raise DataShapeError("continuous effects must have one value per mixture sample.")
        if self.iso_names and len(self.iso_names) != self.n_iso:
            raise DataShapeError("iso_names must name every tracer column.")

    @property
    def N(self) -> int:
        return int(self.data_iso.shape[0])

    @property
    def n_iso(self) -> int:
        return int(self.data_iso.shape[1])

    @property
    def n_effects(self) -> int:
        return len(self.factors)

    @property
    def FAC(self) -> List[Factor]:
        return self.factors

    @property
    def n_re(self) -> int:
        return sum(1 for factor in self.factors if factor.re)

    @property
    def fere(self) -> bool:
        """True for two factors of which at most one is random."""
        return self.n_effects == 2 and self.n_re < 2

    @property
    def n_ce(self) -> int:
        return len(self.cont_effects)

    @property
    def CE(self) -> List[np.ndarray]:
        return self.cont_effects


@dataclass
class Source:
    """Source tracer data, either raw replicates or mean/variance/n summaries.

    Array layouts (``f`` is the source-factor level, present with ``by_factor``):

    - ``SOURCE_array``: ``[source, tracer, (f,) replicate]``; ``n_rep``: ``[source, (f)]``
    - ``MU_array``/``SIG2_array``: ``[source, tracer, (f)]``; ``n_array``: ``[source, (f)]``
    """

    n_sources: int
    data_type: str = "means"
    SOURCE_array: Optional[np.ndarray] = None
    n_rep: Optional[np.ndarray] = None
    MU_array: Optional[np.ndarray] = None
    SIG2_array: Optional[np.ndarray] = None
    n_array: Optional[np.ndarray] = None
    by_factor: Optional[str] = None
    S_factor_levels: Optional[int] = None
    conc_dep: bool = False
    conc: Optional[np.ndarray] = None
    source_names: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        for name in ("SOURCE_array", "MU_array", "SIG2_array", "n_array", "conc"):
            value = getattr(self, name)
            if value is not None:
                setattr(self, name, np.asarray(value, dtype=float))
        if self.n_rep is not None:
            self.n_rep = np.asarray(self.n_rep, dtype=int)

    @property
    def has_factor(self) -> bool:
        return self.by_factor is not None

    def validate(self, n_iso: Optional[int] = None) -> None:
        if self.n_sources < 2:
            raise DataShapeError("a mixing model needs at least 2 sources.")
        if self.data_type not in DATA_TYPES:
            raise DataShapeError(
                f"source data_type must be 'raw' or 'means', got '{self.data_type}'."
            )
        if self.has_factor and not self.S_factor_levels:
            raise DataShapeError("S_factor_levels is required when sources are by factor.")
        lead = (self.n_sources,) + ((self.S_factor_levels,) if self.has_factor else ())

        if self.data_type == "raw":
            if self.SOURCE_array is None or self.n_rep is None:
                raise DataShapeError("raw source data needs SOURCE_array and n_rep.")
            expected_ndim = 4 if self.has_factor else 3
            arr = self.SOURCE_array
            if arr.ndim != expected_ndim or arr.shape[0] != self.n_sources:
                raise DataShapeError(
                    f"SOURCE_array must have {expected_ndim} dimensions with n_sources rows.",
                    context={"shape": arr.shape},
                )
            if self.has_factor and arr.shape[2] != self.S_factor_levels:
                raise DataShapeError("SOURCE_array factor dimension must equal S_factor_levels.")
            if self.n_rep.shape != lead:
                raise DataShapeError("n_rep must be shaped [source(, factor)].")
            tracers = arr.shape[1]
        else:
            if self.MU_array is None or self.SIG2_array is None or self.n_array is None:
                raise DataShapeError("means source data needs MU_array, SIG2_array and n_array.")
            expected_ndim = 3 if self.has_factor else 2
            if self.MU_array.ndim != expected_ndim or self.MU_array.shape[0] != self.n_sources:
                raise DataShapeError(
                    f"MU_array must have {expected_ndim} dimensions with n_sources rows.",
                    context={"shape": self.MU_array.shape},
                )
            if self.SIG2_array.shape != self.MU_array.shape:
                raise DataShapeError("SIG2_array must match the shape of MU_array.")
            if self.has_factor and self.MU_array.shape[2] != self.S_factor_levels:
                raise DataShapeError("MU_array factor dimension must equal S_factor_levels.")
            if self.n_array.shape != lead:
                raise DataShapeError("n_array must be shaped [source(, factor)].")
            tracers = self.MU_array.shape[1]

        if n_iso is not None and tracers != n_iso:
            raise DataShapeError(
                f"source data has {tracers} tracers but the mixture has {n_iso}."
            )
        if self.conc_dep and self.conc is None:
            raise DataShapeError("conc_dep is set but no concentration matrix was given.")


@dataclass
class Discrimination:
    """Per-source, per-tracer discrimination (fractionation) mean and variance."""

    mu: np.ndarray
    sig2: np.ndarray

    def __post_init__(self) -> None:
        self.mu = np.atleast_2d(np.asarray(self.mu, dtype=float))
        self.sig2 = np.atleast_2d(np.asarray(self.sig2, dtype=float))
        if self.mu.shape != self.sig2.shape:
            raise DataShapeError("discrimination mu and sig2 must have the same shape.")

    def validate(self, n_sources: int, n_iso: int) -> None:
        if self.mu.shape != (n_sources, n_iso):
            raise DataShapeError(
                f"discrimination data must be {n_sources} x {n_iso}.",
                context={"shape": self.mu.shape},
            )


def _is_numeric_label(value: object) -> bool:
    return isinstance(value, (numbers.Real, np.number)) and not isinstance(value, (bool, np.bool_))


def as_level_codes(values: Sequence[object]) -> Tuple[np.ndarray, List[str]]:
    """Code labels as 1-based integers in sorted label order.

    Numeric labels sort by value (2 < 9 < 10), anything else by its text.
    """
    values = list(values)
    if values and all(_is_numeric_label(value) for value in values):
        ordered = sorted(set(values))
    else:
        ordered = sorted({str(value) for value in values})
        values = [str(value) for value in values]
    index = {label: i + 1 for i, label in enumerate(ordered)}
    return np.array([index[value] for value in values], dtype=int), [str(label) for label in ordered]
