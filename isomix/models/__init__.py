"""Assembly of the sampler data for effects and sources."""

from .effects import (
    EffectDesign,
    FixedPlusRandom,
    NoEffects,
    OneFactor,
    TwoFactors,
    assemble_continuous_data,
    assemble_effect_data,
    classify_effects,
)
from .sources import assemble_source_data

__all__ = [
    "EffectDesign",
    "FixedPlusRandom",
    "NoEffects",
    "OneFactor",
    "TwoFactors",
    "assemble_continuous_data",
    "assemble_effect_data",
    "assemble_source_data",
    "classify_effects",
]
