"""Input records for the mixing model."""

from .loaders import discrimination_from_frame, mixture_from_frame, source_from_frame
from .types import Discrimination, Factor, Mixture, Source

__all__ = [
    "Discrimination",
    "Factor",
    "Mixture",
    "Source",
    "discrimination_from_frame",
    "mixture_from_frame",
    "source_from_frame",
]
