"""
Baseline Scorer - Deterministic local stand-in for the proprietary scorer.

Divergence is the absolute deviation from a centered rolling median, scaled by
the local baseline magnitude. It emits the same line format as ``rnse_core`` so
the pipeline can run end to end without the proprietary module.
"""

import asyncio
import json
from typing import Iterable

import numpy as np
import pandas as pd

from rnseanomaly.common.dataclasses import ScorerConfig, TimeSeries
from rnseanomaly.common.interfaces.scorer import RawLine, Scorer

# Consistency constant turning MAD into a standard deviation estimate.
MAD_SCALE = 1.4826
EPSILON = 1e-9


class BaselineScorer(Scorer):
    """
    Local scorer whose divergence tracks deviation from the local baseline.
    Configured via Pydantic model fields.
    """

    def _divergence(self, series: TimeSeries, config: ScorerConfig) -> tuple[pd.Series, pd.Series]:
        y = pd.Series(series.values, dtype="float64")
        window = max(int(config.window), 1)

        baseline = y.rolling(window, center=True, min_periods=1).median()
        deviation = (y - baseline).abs()
        spread = deviation.rolling(window, center=True, min_periods=1).median() * MAD_SCALE

        scale = np.maximum(np.maximum(baseline.abs(), spread), EPSILON)
        divergence = deviation / scale

        if config.smoothing is not None:
            divergence = divergence.ewm(alpha=config.smoothing, adjust=False).mean()

        return divergence, baseline

    def _lines(self, seed: int, series: TimeSeries, config: ScorerConfig) -> list[str]:
        divergence, baseline = self._divergence(series, config)
        return [
            json.dumps({
                "t": i,
                "D": round(float(d), 12),
                "baseline": float(b),
                "flag": bool(d > config.threshold),
                "seed": seed,
            })
            for i, (d, b) in enumerate(zip(divergence, baseline), start=1)
        ]

    async def run(self, seed: int, series: TimeSeries, config: ScorerConfig) -> Iterable[RawLine]:
        return await asyncio.to_thread(self._lines, seed, series, config)
