"""Build mixture, source and discrimination records from pandas DataFrames."""

from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from ..errors import DataShapeError
from .types import Discrimination, Factor, Mixture, Source, as_level_codes


def _require_columns(df: pd.DataFrame, columns: Sequence[str], what: str) -> None:
    missing = [col for col in columns if col not in df.columns]
    if missing:
        raise DataShapeError(f"{what} data is missing columns: {missing}")


def _nesting_lookup(inner: np.ndarray, outer: np.ndarray, outer_levels: int) -> np.ndarray:
    # lookup[inner level - 1] = outer level containing it
    lookup = np.zeros(int(inner.max()), dtype=int)
    for inner_level, outer_level in zip(inner, outer):
        lookup[inner_level - 1] = outer_level
    if np.any(lookup < 1) or np.any(lookup > outer_levels):
        raise DataShapeError("nested factor has levels outside the enclosing factor.")
    return lookup


def mixture_from_frame(
    df: pd.DataFrame,
    iso_names: Sequence[str],
    factors: Sequence[str] = (),
    random: Sequence[bool] = (),
    nested: Sequence[bool] = (),
    cont_effects: Sequence[str] = (),
) -> Mixture:
    """Build a Mixture from tracer, factor and covariate columns.

    ``random[i]`` marks factor ``i`` as a random effect. ``nested[i]`` marks
    factor ``i`` as nested within the other factor; the lookup table maps
    each of its levels to the enclosing level of the other factor.
    """
    _require_columns(df, list(iso_names) + list(factors) + list(cont_effects), "mixture")
    if len(factors) > 2:
        raise DataShapeError("at most two mixture factors are supported.")
    random = list(random) or [False] * len(factors)
    nested = list(nested) or [False] * len(factors)
    if len(random) != len(factors) or len(nested) != len(factors):
        raise DataShapeError("random and nested flags must be given for every factor.")

    coded: List[Factor] = []
    for name, is_random in zip(factors, random):
        values, labels = as_level_codes(df[name].tolist())
        coded.append(Factor(levels=len(labels), values=values, re=bool(is_random), name=name, labels=labels))

    fac_nested = (False, False)
    if len(coded) == 2:
        fac_nested = (bool(nested[0]), bool(nested[1]))
        for index, is_nested in enumerate(fac_nested):
            if is_nested:
                inner, outer = coded[index], coded[1 - index]
                inner.lookup = _nesting_lookup(inner.values, outer.values, outer.levels)

    covariates = [df[name].to_numpy(dtype=float) for name in cont_effects]
    return Mixture(
        data_iso=df[list(iso_names)].to_numpy(dtype=float),
        factors=coded,
        fac_nested=fac_nested,
        cont_effects=covariates,
        iso_names=list(iso_names),
    )


def source_from_frame(
    df: pd.DataFrame,
    iso_names: Sequence[str],
    source_col: str = "source",
    factor: Optional[str] = None,
    data_type: str = "means",
    conc_cols: Optional[Sequence[str]] = None,
) -> Source:
    """Build a Source from one row per source (means) or per replicate (raw).

    Summary frames carry ``Mean<iso>``, ``SD<iso>`` and ``n`` columns; the
    variance is the squared SD. Raw frames carry one tracer column per
    tracer and are NaN padded to the largest replicate count.
    Concentration columns (``conc_cols``, one per tracer) are averaged by source.
    """
    _require_columns(df, [source_col] + ([factor] if factor else []), "source")
    source_codes, source_names = as_level_codes(df[source_col].tolist())
    n_sources = len(source_names)
    if factor:
        factor_codes, factor_labels = as_level_codes(df[factor].tolist())
        n_levels = len(factor_labels)
    else:
        factor_codes, n_levels = np.ones(len(df), dtype=int), 1
    n_iso = len(iso_names)

    conc = None
    if conc_cols:
        _require_columns(df, conc_cols, "source")
        conc = (
            df.assign(_src=source_codes)
            .groupby("_src")[list(conc_cols)]
            .mean()
            .sort_index()
            .to_numpy(dtype=float)
        )

    if data_type == "means":
        mean_cols = [f"Mean{iso}" for iso in iso_names]
        sd_cols = [f"SD{iso}" for iso in iso_names]
        _require_columns(df, mean_cols + sd_cols + ["n"], "source")
        mu = np.full((n_sources, n_iso, n_levels), np.nan)
        sig2 = np.full((n_sources, n_iso, n_levels), np.nan)
        counts = np.zeros((n_sources, n_levels))
        for record, src, lvl in zip(df.to_dict("records"), source_codes, factor_codes):
            mu[src - 1, :, lvl - 1] = [record[col] for col in mean_cols]
            sig2[src - 1, :, lvl - 1] = [record[col] ** 2 for col in sd_cols]
            counts[src - 1, lvl - 1] = record["n"]
        if not factor:
            mu, sig2, counts = mu[:, :, 0], sig2[:, :, 0], counts[:, 0]
        return Source(
            n_sources=n_sources,
            data_type="means",
            MU_array=mu,
            SIG2_array=sig2,
            n_array=counts,
            by_factor=factor,
            S_factor_levels=n_levels if factor else None,
            conc_dep=conc is not None,
            conc=conc,
            source_names=source_names,
        )

    if data_type != "raw":
        raise DataShapeError(f"source data_type must be 'raw' or 'means', got '{data_type}'.")
    _require_columns(df, iso_names, "source")
    n_rep = np.zeros((n_sources, n_levels), dtype=int)
    for src, lvl in zip(source_codes, factor_codes):
        n_rep[src - 1, lvl - 1] += 1
    arr = np.full((n_sources, n_iso, n_levels, int(n_rep.max())), np.nan)
    filled = np.zeros_like(n_rep)
    values = df[list(iso_names)].to_numpy(dtype=float)
    for row, src, lvl in zip(values, source_codes, factor_codes):
        arr[src - 1, :, lvl - 1, filled[src - 1, lvl - 1]] = row
        filled[src - 1, lvl - 1] += 1
    if not factor:
        arr, n_rep = arr[:, :, 0, :], n_rep[:, 0]
    return Source(
        n_sources=n_sources,
        data_type="raw",
        SOURCE_array=arr,
        n_rep=n_rep,
        by_factor=factor,
        S_factor_levels=n_levels if factor else None,
        conc_dep=conc is not None,
        conc=conc,
        source_names=source_names,
    )


def discrimination_from_frame(
    df: pd.DataFrame,
    iso_names: Sequence[str],
    source_names: Optional[Sequence[str]] = None,
    source_col: str = "source",
) -> Discrimination:
    """Read ``Mean<iso>``/``SD<iso>`` columns; rows follow ``source_names`` when given."""
    mean_cols = [f"Mean{iso}" for iso in iso_names]
    sd_cols = [f"SD{iso}" for iso in iso_names]
    _require_columns(df, mean_cols + sd_cols, "discrimination")
    if source_names is not None:
        _require_columns(df, [source_col], "discrimination")
        indexed = df.assign(**{source_col: df[source_col].astype(str)}).set_index(source_col)
        missing = [name for name in source_names if name not in indexed.index]
        if missing:
            raise DataShapeError(f"discrimination data is missing sources: {missing}")
        df = indexed.loc[list(source_names)]
    return Discrimination(
        mu=df[mean_cols].to_numpy(dtype=float),
        sig2=df[sd_cols].to_numpy(dtype=float) ** 2,
    )
