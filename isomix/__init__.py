"""isomix package entry points."""

from .coda import ilr, inverse_ilr, orthonormal_basis
from .config import RUN_PRESETS, RunConfig, load_run_config, resolve_run_config
from .data import (
    Discrimination,
    Factor,
    Mixture,
    Source,
    discrimination_from_frame,
    mixture_from_frame,
    source_from_frame,
)
from .errors import (
    ConfigError,
    DataShapeError,
    DegenerateScaleError,
    InvalidPriorError,
    IsomixError,
    PriorLengthError,
    UnknownErrorStructureError,
    ZeroAlphaError,
)
from .logging_utils import configure_logging
from .model_file import ErrorStructure, read_error_structure
from .normalize import TracerScale, denormalize, normalize_tracers
from .pipeline import DirichletInits, ModelDataBundle, build_model_data, run_model
from .prior import resolve_prior
from .sampler import JagsSampler, Sampler

__all__ = [
    "ConfigError",
    "DataShapeError",
    "DegenerateScaleError",
    "DirichletInits",
    "Discrimination",
    "ErrorStructure",
    "Factor",
    "InvalidPriorError",
    "IsomixError",
    "JagsSampler",
    "Mixture",
    "ModelDataBundle",
    "PriorLengthError",
    "RUN_PRESETS",
    "RunConfig",
    "Sampler",
    "Source",
    "TracerScale",
    "UnknownErrorStructureError",
    "ZeroAlphaError",
    "build_model_data",
    "configure_logging",
    "denormalize",
    "discrimination_from_frame",
    "ilr",
    "inverse_ilr",
    "load_run_config",
    "mixture_from_frame",
    "normalize_tracers",
    "orthonormal_basis",
    "read_error_structure",
    "resolve_prior",
    "resolve_run_config",
    "run_model",
    "source_from_frame",
]

__version__ = "0.1.0"
