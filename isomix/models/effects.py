"""Sampler data for categorical and continuous mixture effects.

The mixture design is classified once into one of four variants and each
variant emits its own data entries and monitored parameters.

- ``NoEffects``: no factor data.
- ``OneFactor``: factor 1 data with inverse-ILR scratch arrays, ``p.fac1``.
- ``TwoFactors``: both factors random, optionally nested.
- ``FixedPlusRandom``: two factors with at most one random effect. Factor 1
  is fixed and only ILR coordinates are monitored for the pair.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple, Union

import numpy as np

from ..data.types import Factor, Mixture
from ..logging_utils import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class NoEffects:
    pass


@dataclass(frozen=True)
class OneFactor:
    random: bool


@dataclass(frozen=True)
class TwoFactors:
    random1: bool
    random2: bool
    nested1: bool = False
    nested2: bool = False


@dataclass(frozen=True)
class FixedPlusRandom:
    n_re: int
    fac2_random: bool


EffectDesign = Union[NoEffects, OneFactor, TwoFactors, FixedPlusRandom]


def extend_parameters(parameters: List[str], names: Iterable[str]) -> List[str]:
    """Append ``names`` to ``parameters`` skipping any already present."""
    for name in names:
        if name not in parameters:
            parameters.append(name)
    return parameters


def classify_effects(mixture: Mixture) -> EffectDesign:
    factors = mixture.factors
    if mixture.n_effects == 0:
        design: EffectDesign = NoEffects()
    elif mixture.n_effects == 1:
        design = OneFactor(random=factors[0].re)
    elif mixture.fere:
        design = FixedPlusRandom(n_re=mixture.n_re, fac2_random=factors[1].re)
    else:
        design = TwoFactors(
            random1=factors[0].re,
            random2=factors[1].re,
            nested1=mixture.fac_nested[0],
            nested2=mixture.fac_nested[1],
        )
    logger.debug("Mixture effect design: %s", design)
    return design


def _scratch_arrays(levels: int, n_sources: int) -> Tuple[np.ndarray, np.ndarray]:
    cross = np.full((levels, n_sources, n_sources - 1), np.nan)
    tmp_p = np.full((levels, n_sources), np.nan)
    return cross, tmp_p


def _factor_entries(index: int, factor: Factor) -> Dict[str, object]:
    return {
        f"factor{index}_levels": int(factor.levels),
        f"Factor.{index}": factor.values.copy(),
    }


def _factor_with_scratch(index: int, factor: Factor, n_sources: int) -> Dict[str, object]:
    cross, tmp_p = _scratch_arrays(factor.levels, n_sources)
    data = _factor_entries(index, factor)
    data[f"cross.fac{index}"] = cross
    data[f"tmp.p.fac{index}"] = tmp_p
    return data


def assemble_effect_data(
    design: EffectDesign, mixture: Mixture, n_sources: int
) -> Tuple[Dict[str, object], List[str]]:
    """Return the data entries and monitored parameters for ``design``."""
    data: Dict[str, object] = {}
    parameters: List[str] = []
    factors = mixture.factors

    if isinstance(design, NoEffects):
        return data, parameters

    if isinstance(design, FixedPlusRandom):
        fac1, fac2 = factors
        if design.n_re == 1:
            cross, tmp_p = _scratch_arrays(fac1.levels, n_sources)
            data["cross.fac1"] = cross
            data["tmp.p.fac1"] = tmp_p
            extend_parameters(parameters, ["p.fac1"])
        if design.fac2_random:
            extend_parameters(parameters, ["fac2.sig"])
        extend_parameters(parameters, ["ilr.global", "ilr.fac1", "ilr.fac2"])
        data.update(_factor_entries(1, fac1))
        data.update(_factor_entries(2, fac2))
        return data, parameters

    # OneFactor and TwoFactors share the factor-1 block
    data.update(_factor_with_scratch(1, factors[0], n_sources))
    extend_parameters(parameters, ["p.fac1", "ilr.fac1"])
    if factors[0].re:
        extend_parameters(parameters, ["fac1.sig"])

    if isinstance(design, TwoFactors):
        if design.nested1:
            data["factor2_lookup"] = factors[0].lookup.copy()
        if design.nested2:
            data["factor1_lookup"] = factors[1].lookup.copy()
        data.update(_factor_with_scratch(2, factors[1], n_sources))
        extend_parameters(parameters, ["p.fac2", "ilr.fac2"])
        if factors[1].re:
            extend_parameters(parameters, ["fac2.sig"])

    return data, parameters


def assemble_continuous_data(mixture: Mixture) -> Tuple[Dict[str, object], List[str]]:
    """Bind each continuous covariate as ``Cont.<k>`` (1-based)."""
    data: Dict[str, object] = {}
    parameters: List[str] = []
    for k, values in enumerate(mixture.cont_effects, start=1):
        data[f"Cont.{k}"] = np.asarray(values, dtype=float).copy()
        extend_parameters(parameters, ["ilr.global", f"ilr.cont{k}", "p.ind"])
    return data, parameters
