"""Sampler data for the source records."""

from typing import Dict

from ..data.types import Source


def assemble_source_data(source: Source) -> Dict[str, object]:
    """Return the source entries of the sampler data.

    Raw data contributes the replicate array and replicate counts; summary
    data contributes means, variances and sample sizes. The source-factor
    level count and the concentration matrix are added when present.
    """
    if source.data_type == "raw":
        data: Dict[str, object] = {
            "SOURCE_array": source.SOURCE_array.copy(),
            "n_rep": source.n_rep.copy(),
        }
    else:
        data = {
            "MU_array": source.MU_array.copy(),
            "SIG2_array": source.SIG2_array.copy(),
            "n_array": source.n_array.copy(),
        }
    if source.has_factor:
        data["source_factor_levels"] = int(source.S_factor_levels)
    if source.conc_dep:
        data["conc"] = source.conc.copy()
    return data
