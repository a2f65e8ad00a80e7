"""
Anomaly Extractor - Converts divergence into thresholded confidence flags.
"""

from typing import Iterable

from rnseanomaly.common.dataclasses import AnomalyFlag, ScoreLine

DEFAULT_FLAG_THRESHOLD = 0.3
DEFAULT_NORMALIZATION_CONSTANT = 1.0


def to_confidence(divergence: float, normalization_constant: float = DEFAULT_NORMALIZATION_CONSTANT) -> float:
    """Scale divergence into [0, 1]."""
    return min(max(divergence / normalization_constant, 0.0), 1.0)


def extract_anomalies(
    score_lines: Iterable[ScoreLine],
    threshold: float = DEFAULT_FLAG_THRESHOLD,
    normalization_constant: float = DEFAULT_NORMALIZATION_CONSTANT,
) -> tuple[AnomalyFlag, ...]:
    """
    Flag every line whose confidence is strictly greater than ``threshold``.

    The normalization constant is a configured tunable, never inferred from
    the data. Output is ascending by index with each index at most once.

    Args:
        score_lines: Scorer output aligned with the series
        threshold: Exclusive confidence threshold
        normalization_constant: Divergence that maps to confidence 1.0

    Returns:
        Ordered anomaly flags
    """
    if normalization_constant <= 0:
        raise ValueError("normalization_constant must be positive")

    flags: dict[int, AnomalyFlag] = {}
    for line in score_lines:
        confidence = to_confidence(line.divergence, normalization_constant)
        if confidence > threshold:
            flags[line.index] = AnomalyFlag(index=line.index, confidence=confidence)

    return tuple(flags[index] for index in sorted(flags))
