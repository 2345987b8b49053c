"""
MCMC sampler backends.

The mixing model is sampled by an external engine. Any callable with the
``Sampler`` signature can be passed to ``run_model``; ``JagsSampler`` runs
the model file through JAGS.

Requirements:
    pip install pyjags
"""

from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Protocol, Sequence, Union

from .config import RunConfig
from .logging_utils import get_logger

logger = get_logger(__name__)

InitsFn = Callable[[], Dict[str, Any]]


class Sampler(Protocol):
    def __call__(
        self,
        data: Mapping[str, Any],
        inits: InitsFn,
        parameters: Sequence[str],
        model_file: Union[str, Path],
        run: RunConfig,
    ) -> Any:
        ...


class JagsSampler:
    """Run a JAGS model through pyjags.

    Each chain gets its own call to ``inits``. ``run.burn`` iterations are
    discarded, then ``run.chain_length - run.burn`` iterations are drawn with
    thinning ``run.thin``. With ``run.calc_dic`` the ``deviance`` node is
    monitored as well.

    Returns the pyjags sample dictionary (variable name -> array shaped
    ``(*dims, draws, chains)``).
    """

    def __init__(self, adapt: int = 1000, progress_bar: bool = False, threads: int = 1):
        self.adapt = adapt
        self.progress_bar = progress_bar
        self.threads = threads

    def __call__(
        self,
        data: Mapping[str, Any],
        inits: InitsFn,
        parameters: Sequence[str],
        model_file: Union[str, Path],
        run: RunConfig,
    ) -> Dict[str, Any]:
        try:
            import pyjags
        except ImportError:
            raise ImportError(
                "pyjags is required to run the JAGS sampler. "
                "Install JAGS and then: pip install pyjags"
            )

        monitored = list(parameters)
        if run.calc_dic:
            pyjags.load_module("dic")
            if "deviance" not in monitored:
                monitored.append("deviance")

        model = pyjags.Model(
            file=str(model_file),
            data=dict(data),
            init=[inits() for _ in range(run.chains)],
            chains=run.chains,
            adapt=self.adapt,
            progress_bar=self.progress_bar,
            threads=self.threads,
        )
        if run.burn > 0:
            model.sample(run.burn, vars=[])
        logger.info(
            "Sampling %d chains x %d iterations (thin=%d)", run.chains, run.n_samples, run.thin
        )
        return model.sample(run.n_samples, vars=monitored, thin=run.thin)
