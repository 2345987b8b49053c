"""MCMC run configuration and named run-length presets."""

import numbers
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Union

import yaml

from .errors import ConfigError

# (chainLength, burn, thin, chains, calcDIC)
RUN_PRESETS: Dict[str, tuple] = {
    "test": (1000, 500, 1, 3, True),
    "very short": (10000, 5000, 5, 3, True),
    "short": (50000, 25000, 25, 3, True),
    "normal": (100000, 50000, 50, 3, True),
    "long": (300000, 200000, 100, 3, True),
    "very long": (1000000, 500000, 500, 3, True),
    "extreme": (3000000, 1500000, 500, 3, True),
}

# Accepted spellings for each RunConfig field in user-supplied mappings.
_FIELD_ALIASES = {
    "chain_length": ("chain_length", "chainLength"),
    "burn": ("burn",),
    "thin": ("thin",),
    "chains": ("chains",),
    "calc_dic": ("calc_dic", "calcDIC"),
}


@dataclass(frozen=True)
class RunConfig:
    chain_length: int
    burn: int
    thin: int
    chains: int
    calc_dic: bool = True

    def validate(self) -> None:
        for name in ("chain_length", "burn", "thin", "chains"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise ConfigError(f"{name} must be an integer.", context={name: value})
        if self.burn < 0:
            raise ConfigError("burn must be non-negative.", context={"burn": self.burn})
        if self.burn >= self.chain_length:
            raise ConfigError(
                "burn must be smaller than chain_length.",
                context={"burn": self.burn, "chain_length": self.chain_length},
            )
        if self.thin < 1:
            raise ConfigError("thin must be at least 1.", context={"thin": self.thin})
        if self.chains < 1:
            raise ConfigError("chains must be at least 1.", context={"chains": self.chains})
        if not isinstance(self.calc_dic, bool):
            raise ConfigError("calc_dic must be a boolean.", context={"calc_dic": self.calc_dic})

    @property
    def n_samples(self) -> int:
        """Iterations kept per chain after burn-in, before thinning."""
        return self.chain_length - self.burn

    def as_tuple(self) -> tuple:
        return (self.chain_length, self.burn, self.thin, self.chains, self.calc_dic)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "RunConfig":
        kwargs: Dict[str, Any] = {}
        for field_name, aliases in _FIELD_ALIASES.items():
            for alias in aliases:
                if alias in values:
                    kwargs[field_name] = values[alias]
                    break
        missing = [name for name in ("chain_length", "burn", "thin", "chains") if name not in kwargs]
        if missing:
            raise ConfigError(f"Run configuration is missing fields: {missing}")
        unknown = set(values) - {alias for aliases in _FIELD_ALIASES.values() for alias in aliases}
        if unknown:
            raise ConfigError(f"Run configuration has unknown fields: {sorted(unknown)}")
        return cls(**kwargs)

    @classmethod
    def preset(cls, name: str) -> "RunConfig":
        if name not in RUN_PRESETS:
            raise ConfigError(
                f"Unknown run preset '{name}'. Choose one of: {', '.join(RUN_PRESETS)}."
            )
        return cls(*RUN_PRESETS[name])


def resolve_run_config(run: Union[str, Mapping[str, Any], RunConfig]) -> RunConfig:
    """Turn a preset name or a run-parameter record into a validated RunConfig."""
    if isinstance(run, RunConfig):
        config = run
    elif isinstance(run, Mapping):
        config = RunConfig.from_mapping(run)
    elif isinstance(run, str):
        config = RunConfig.preset(run)
    else:
        raise ConfigError(
            "run must be a RunConfig, a mapping of MCMC parameters or a preset name.",
            context={"type": type(run).__name__},
        )
    config.validate()
    return config


def load_run_config(path: Union[str, Path]) -> RunConfig:
    """Read a run configuration from YAML: either a preset name or a mapping."""
    with open(path, "r", encoding="utf-8") as handle:
        payload = yaml.safe_load(handle)
    if isinstance(payload, Mapping) and "run" in payload:
        payload = payload["run"]
    if payload is None:
        raise ConfigError(f"Run configuration file '{path}' is empty.")
    return resolve_run_config(payload)
