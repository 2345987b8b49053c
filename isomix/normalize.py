"""Pooled centering and scaling of tracer data.

Tracer values are normalized before sampling so the same priors work
regardless of the scale of the tracer data. For each tracer the pooled mean
and standard deviation of the mixture and source data are computed once and
applied to every data set:

- mixture values, raw source values and source means: ``(x - mean) / sd``
- source variances and discrimination variances: ``v / sd**2``
- discrimination means: ``mu / sd``

Normalization does not change the proportion estimates. Inputs are never
modified; new arrays are returned together with the per-tracer scales.
"""

from dataclasses import dataclass, replace
from typing import List

import numpy as np

from .data.types import Discrimination, Source
from .errors import DegenerateScaleError
from .logging_utils import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class TracerScale:
    mean: float
    sd: float

    def apply(self, values: np.ndarray) -> np.ndarray:
        return (np.asarray(values, dtype=float) - self.mean) / self.sd

    def apply_variance(self, values: np.ndarray) -> np.ndarray:
        return np.asarray(values, dtype=float) / self.sd ** 2

    def invert(self, values: np.ndarray) -> np.ndarray:
        return np.asarray(values, dtype=float) * self.sd + self.mean


@dataclass(frozen=True)
class NormalizedData:
    data_iso: np.ndarray
    source: Source
    discr: Discrimination
    scales: List[TracerScale]


def denormalize(values: np.ndarray, scale: TracerScale) -> np.ndarray:
    """Map normalized tracer values back to the original units."""
    return scale.invert(values)


def _checked(mean: float, sd: float, tracer: int) -> TracerScale:
    if not np.isfinite(mean) or not np.isfinite(sd) or sd <= 0:
        raise DegenerateScaleError(
            f"Pooled standard deviation for tracer {tracer + 1} is zero or undefined; "
            "the tracer cannot be normalized.",
            context={"tracer": tracer + 1, "mean_pool": mean, "sd_pool": sd},
        )
    return TracerScale(mean=float(mean), sd=float(sd))


def pooled_scale_raw(mix_values: np.ndarray, source_values: np.ndarray, tracer: int = 0) -> TracerScale:
    """Pooled mean and sample SD of the finite mixture and source replicate values."""
    pooled = np.concatenate(
        [np.ravel(np.asarray(mix_values, dtype=float)), np.ravel(np.asarray(source_values, dtype=float))]
    )
    pooled = pooled[np.isfinite(pooled)]
    if pooled.size < 2:
        return _checked(float("nan"), float("nan"), tracer)
    return _checked(pooled.mean(), pooled.std(ddof=1), tracer)


def pooled_scale_means(
    mix_values: np.ndarray,
    mu: np.ndarray,
    sig2: np.ndarray,
    n: np.ndarray,
    tracer: int = 0,
) -> TracerScale:
    """Pooled mean and SD from mixture values and source mean/variance/n summaries.

    Uses the combined-sample formulas for pooled groups. With a single
    mixture sample its variance is undefined, so the ``(N - 1) * var``
    term is left out rather than evaluated.
    """
    x = np.asarray(mix_values, dtype=float).ravel()
    N = x.size
    mu = np.asarray(mu, dtype=float).ravel()
    sig2 = np.asarray(sig2, dtype=float).ravel()
    n = np.asarray(n, dtype=float).ravel()
    keep = np.isfinite(mu) & np.isfinite(sig2) & (n > 0)
    mu, sig2, n = mu[keep], sig2[keep], n[keep]

    x_mean = np.nanmean(x)
    n_total = n.sum() + N
    mean_pool = (N * x_mean + n @ mu) / n_total
    total_ss = np.sum((n - 1) * sig2) + n @ mu ** 2 + N * x_mean ** 2 - n_total * mean_pool ** 2
    if N > 1:
        total_ss += (N - 1) * np.nanvar(x, ddof=1)
    sd_pool = np.sqrt(total_ss / (n_total - 1)) if total_ss >= 0 else float("nan")
    return _checked(mean_pool, sd_pool, tracer)


def normalize_tracers(data_iso: np.ndarray, source: Source, discr: Discrimination) -> NormalizedData:
    """Normalize mixture, source and discrimination data tracer by tracer."""
    x_iso = np.array(data_iso, dtype=float, copy=True)
    frac_mu = np.array(discr.mu, dtype=float, copy=True)
    frac_sig2 = np.array(discr.sig2, dtype=float, copy=True)
    raw = source.data_type == "raw"
    if raw:
        source_arr = np.array(source.SOURCE_array, dtype=float, copy=True)
    else:
        mu_arr = np.array(source.MU_array, dtype=float, copy=True)
        sig2_arr = np.array(source.SIG2_array, dtype=float, copy=True)

    scales: List[TracerScale] = []
    for j in range(x_iso.shape[1]):
        if raw:
            scale = pooled_scale_raw(x_iso[:, j], source_arr[:, j, ...], tracer=j)
            source_arr[:, j, ...] = scale.apply(source_arr[:, j, ...])
        else:
            scale = pooled_scale_means(
                x_iso[:, j], mu_arr[:, j, ...], sig2_arr[:, j, ...], source.n_array, tracer=j
            )
            mu_arr[:, j, ...] = scale.apply(mu_arr[:, j, ...])
            sig2_arr[:, j, ...] = scale.apply_variance(sig2_arr[:, j, ...])

        x_iso[:, j] = scale.apply(x_iso[:, j])
        frac_mu[:, j] = frac_mu[:, j] / scale.sd
        frac_sig2[:, j] = scale.apply_variance(frac_sig2[:, j])
        logger.debug("Tracer %d pooled mean=%.6g sd=%.6g", j + 1, scale.mean, scale.sd)
        scales.append(scale)

    if raw:
        new_source = replace(source, SOURCE_array=source_arr)
    else:
        new_source = replace(source, MU_array=mu_arr, SIG2_array=sig2_arr)
    return NormalizedData(
        data_iso=x_iso,
        source=new_source,
        discr=Discrimination(mu=frac_mu, sig2=frac_sig2),
        scales=scales,
    )
