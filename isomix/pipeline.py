"""Assemble the mixing-model data and run the sampler.

``build_model_data`` validates the inputs and returns the complete
``ModelDataBundle``; ``run_model`` hands that bundle to a sampler and returns
the sampler's result unchanged.

Always passed to the sampler: ``X_iso``, ``N``, ``n_sources``, ``n_iso``,
``alpha``, ``frac_mu``, ``e``, ``cross`` and ``tmp.p``. Effect, source and
continuous-covariate entries depend on the mixture and source designs, and
the error structure adds:

- ``resid`` with more than one tracer: identity matrix ``I``
- ``process`` or ``mult``: discrimination variance ``frac_sig2``
- ``mult``: monitored parameter ``resid.prop``
"""

from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from .coda import orthonormal_basis
from .config import RunConfig, resolve_run_config
from .data.types import Discrimination, Mixture, Source
from .errors import DataShapeError
from .logging_utils import get_logger
from .model_file import ErrorStructure, read_error_structure
from .models.effects import (
    assemble_continuous_data,
    assemble_effect_data,
    classify_effects,
    extend_parameters,
)
from .models.sources import assemble_source_data
from .normalize import TracerScale, normalize_tracers
from .prior import resolve_prior
from .sampler import JagsSampler, Sampler

logger = get_logger(__name__)

BASE_PARAMETERS = ("p.global", "loglik")


class DirichletInits:
    """Initial values drawing ``p.global`` from Dirichlet(alpha) on every call."""

    def __init__(self, alpha: np.ndarray, rng: Optional[np.random.Generator] = None):
        self.alpha = np.asarray(alpha, dtype=float)
        self.rng = rng if rng is not None else np.random.default_rng()

    def __call__(self) -> Dict[str, np.ndarray]:
        return {"p.global": self.rng.dirichlet(self.alpha)}

    def chain_inits(self, chains: int) -> List[Dict[str, np.ndarray]]:
        return [self() for _ in range(chains)]


@dataclass(frozen=True)
class ModelDataBundle:
    data: Mapping[str, Any]
    parameters: Tuple[str, ...]
    inits: DirichletInits
    scales: Tuple[TracerScale, ...]
    error_structure: ErrorStructure
    run: RunConfig
    model_file: Path

    def __getitem__(self, name: str) -> Any:
        return self.data[name]

    def __contains__(self, name: object) -> bool:
        return name in self.data

    def keys(self):
        return self.data.keys()


def _freeze(value: Any) -> Any:
    if isinstance(value, np.ndarray):
        value = value.copy()
        value.setflags(write=False)
    return value


def build_model_data(
    run: Union[str, Mapping[str, Any], RunConfig],
    mix: Mixture,
    source: Source,
    discr: Discrimination,
    model_filename: Union[str, Path],
    alpha_prior: Union[float, Sequence[float]] = 1,
    rng: Optional[np.random.Generator] = None,
) -> ModelDataBundle:
    """Validate the inputs and assemble the sampler data and parameter list."""
    err = read_error_structure(model_filename)
    alpha = resolve_prior(alpha_prior, source.n_sources)
    mcmc = resolve_run_config(run)
    source.validate(n_iso=mix.n_iso)
    discr.validate(source.n_sources, mix.n_iso)
    if source.conc_dep and source.conc.shape != (source.n_sources, mix.n_iso):
        raise DataShapeError("conc must be shaped n_sources x n_iso.")

    n_sources = source.n_sources
    N = mix.N
    e = orthonormal_basis(n_sources)

    parameters: List[str] = list(BASE_PARAMETERS)
    design = classify_effects(mix)
    f_data, f_params = assemble_effect_data(design, mix, n_sources)
    extend_parameters(parameters, f_params)

    normalized = normalize_tracers(mix.data_iso, source, discr)
    s_data = assemble_source_data(normalized.source)
    c_data, c_params = assemble_continuous_data(mix)
    extend_parameters(parameters, c_params)

    data: Dict[str, Any] = {
        "X_iso": normalized.data_iso,
        "N": N,
        "n_sources": n_sources,
        "n_iso": mix.n_iso,
        "alpha": alpha,
        "frac_mu": normalized.discr.mu,
        "e": e,
        # scratch arrays for the inverse-ILR calculation inside the sampler
        "cross": np.full((N, n_sources, n_sources - 1), np.nan),
        "tmp.p": np.full((N, n_sources), np.nan),
    }
    data.update(f_data)
    data.update(s_data)
    data.update(c_data)

    if err == ErrorStructure.RESID and mix.n_iso > 1:
        data["I"] = np.eye(mix.n_iso)
    if err != ErrorStructure.RESID:
        data["frac_sig2"] = normalized.discr.sig2
    if err == ErrorStructure.MULT:
        extend_parameters(parameters, ["resid.prop"])

    logger.debug(
        "Assembled %d data entries and %d parameters (error structure %s)",
        len(data),
        len(parameters),
        err.value,
    )
    return ModelDataBundle(
        data=MappingProxyType({name: _freeze(value) for name, value in data.items()}),
        parameters=tuple(parameters),
        inits=DirichletInits(alpha, rng),
        scales=tuple(normalized.scales),
        error_structure=err,
        run=mcmc,
        model_file=Path(model_filename),
    )


def run_model(
    run: Union[str, Mapping[str, Any], RunConfig],
    mix: Mixture,
    source: Source,
    discr: Discrimination,
    model_filename: Union[str, Path],
    alpha_prior: Union[float, Sequence[float]] = 1,
    sampler: Optional[Sampler] = None,
    rng: Optional[np.random.Generator] = None,
) -> Any:
    """Run the mixing model and return the sampler's output unmodified.

    Tracer values are normalized before sampling (see ``isomix.normalize``).
    This keeps the priors independent of the scale of the tracer data and
    does not affect the proportion estimates, but posterior predictive
    values are on the normalized scale; ``ModelDataBundle.scales`` maps them
    back.
    """
    bundle = build_model_data(run, mix, source, discr, model_filename, alpha_prior, rng)
    sampler = sampler if sampler is not None else JagsSampler()
    logger.info(
        "Running %s with %d sources, %d tracers, %d mixture samples",
        bundle.model_file.name,
        bundle["n_sources"],
        bundle["n_iso"],
        bundle["N"],
    )
    return sampler(
        bundle.data,
        bundle.inits,
        list(bundle.parameters),
        bundle.model_file,
        bundle.run,
    )
