"""
Scorer Port - Interface for the external anomaly scoring routine.

The scoring algorithm is an opaque capability. Implementations only have to
produce the raw line-oriented output; parsing and the count check live here so
every variant is held to the same contract.
"""

import json
import logging
import math
from abc import ABC, abstractmethod
from typing import Any, Iterable, Mapping

from pydantic import BaseModel, ConfigDict

from rnseanomaly.common.dataclasses import ScoreLine, ScorerConfig, TimeSeries
from rnseanomaly.common.exceptions import ScorerContractViolation

logger = logging.getLogger(__name__)

RawLine = str | bytes | Mapping[str, Any]


def parse_score_line(raw: RawLine, divergence_field: str) -> tuple[float, dict[str, Any]] | None:
    """
    Parse one raw output line into (divergence, metadata).

    Returns None when the line is unusable: not a JSON object, missing the
    divergence field, or carrying a negative or non-finite value. Every other
    field is returned untouched as opaque metadata.
    """
    if isinstance(raw, (str, bytes)):
        try:
            record = json.loads(raw)
        except (ValueError, UnicodeDecodeError):
            return None
    else:
        record = raw

    if not isinstance(record, Mapping) or divergence_field not in record:
        return None

    value = record[divergence_field]
    if isinstance(value, bool):
        return None
    try:
        divergence = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(divergence) or divergence < 0:
        return None

    metadata = {k: v for k, v in record.items() if k != divergence_field}
    return divergence, metadata


def parse_score_lines(
    raw_lines: Iterable[RawLine],
    expected: int,
    divergence_field: str = "D",
) -> list[ScoreLine]:
    """
    Turn raw scorer output into ScoreLines aligned with the input series.

    Unparseable lines are dropped, then the count is re-checked. A mismatch
    means the scorer broke its contract and is never truncated silently.
    """
    parsed = []
    dropped = 0
    for raw in raw_lines:
        if isinstance(raw, (str, bytes)) and not raw.strip():
            continue
        result = parse_score_line(raw, divergence_field)
        if result is None:
            dropped += 1
            continue
        parsed.append(result)

    if dropped:
        logger.warning(f"Dropped {dropped} unparseable scorer line(s)")

    if len(parsed) != expected:
        raise ScorerContractViolation(
            f"Scorer returned {len(parsed)} usable line(s) for {expected} sample(s)"
        )

    return [
        ScoreLine(index=i, divergence=divergence, metadata=metadata)
        for i, (divergence, metadata) in enumerate(parsed, start=1)
    ]


class Scorer(BaseModel, ABC):
    """
    Abstract interface for the external scorer.
    Also serves as a Pydantic Model for configuration validation.

    Implementations:
    - RnseCoreScorer: in-process proprietary module
    - RemoteScorer: scorer hosted behind an HTTP endpoint
    - BaselineScorer: deterministic local stand-in
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    divergence_field: str = "D"

    @property
    def name(self) -> str:
        return self.__class__.__name__

    @abstractmethod
    async def run(
        self,
        seed: int,
        series: TimeSeries,
        config: ScorerConfig,
    ) -> Iterable[RawLine]:
        """
        Invoke the scoring routine.

        Args:
            seed: 64-bit seed for the routine
            series: Decoded input series
            config: Threshold and windowing parameters

        Returns:
            Line-structured output, one entry per sample

        Raises:
            ScorerUnavailable: the routine cannot be reached
            ScorerContractViolation: the routine failed or answered garbage
        """
        ...

    async def score(self, series: TimeSeries, config: ScorerConfig) -> list[ScoreLine]:
        """Run the scorer and return one verified ScoreLine per sample."""
        logger.info(f"Scoring {len(series)} samples with {self.name} (seed={config.seed})")
        raw_lines = await self.run(config.seed, series, config)
        return parse_score_lines(raw_lines, len(series), self.divergence_field)

    async def health_check(self) -> bool:
        """Check whether the scorer can be invoked."""
        return True
