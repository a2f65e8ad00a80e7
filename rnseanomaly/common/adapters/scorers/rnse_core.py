"""
RNSE Core Adapter - Wrapper for the proprietary in-process scoring module.

The module is supplied separately and used unmodified. It is called as
``rnse_core.run(seed=..., n=..., values=..., threshold=..., window=...,
smoothing=...)`` and yields one structured log line per sample.
"""

import asyncio
import logging
from typing import Iterable

try:
    import rnse_core
except ImportError:
    rnse_core = None

from rnseanomaly.common.dataclasses import ScorerConfig, TimeSeries
from rnseanomaly.common.exceptions import ScorerContractViolation, ScorerUnavailable
from rnseanomaly.common.interfaces.scorer import RawLine, Scorer

logger = logging.getLogger(__name__)


class RnseCoreScorer(Scorer):
    """
    Adapter for the ``rnse_core`` module.
    Configured via Pydantic model fields.
    """

    async def run(self, seed: int, series: TimeSeries, config: ScorerConfig) -> Iterable[RawLine]:
        if rnse_core is None:
            raise ScorerUnavailable(
                "rnse_core is not installed; install the supplied scorer package"
            )

        def _invoke() -> list[RawLine]:
            # Materialize inside the worker thread; the module may return a generator.
            return list(rnse_core.run(
                seed=seed,
                n=len(series),
                values=list(series.values),
                threshold=config.threshold,
                window=config.window,
                smoothing=config.smoothing,
            ))

        try:
            return await asyncio.to_thread(_invoke)
        except Exception as e:
            logger.error(f"rnse_core failed on {len(series)} samples: {e}")
            raise ScorerContractViolation(f"rnse_core raised {type(e).__name__}: {e}") from e

    async def health_check(self) -> bool:
        return rnse_core is not None
