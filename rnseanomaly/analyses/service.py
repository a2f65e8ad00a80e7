"""
Analysis Service - The core engine of RNSE Anomaly.

This service orchestrates the upload-to-record cycle:
1. Decode the uploaded CSV into a series
2. Score the series with the external scorer
3. Extract thresholded anomaly flags
4. Persist one write-once record
"""

import dataclasses
import logging
from typing import Any

from rnseanomaly.common.csv_codec import decode_bytes, decode_series, encode_record
from rnseanomaly.common.dataclasses import (
    AnalysisOutcome,
    AnomalyFlag,
    RecordSummary,
    ScorerConfig,
    TimeSeries,
)
from rnseanomaly.common.exceptions import ScorerContractViolation
from rnseanomaly.common.extraction import (
    DEFAULT_FLAG_THRESHOLD,
    DEFAULT_NORMALIZATION_CONSTANT,
    extract_anomalies,
)
from rnseanomaly.common.interfaces.result_store import ResultStore
from rnseanomaly.common.interfaces.scorer import Scorer

logger = logging.getLogger(__name__)


class AnalysisService:
    """
    Core service that runs one request-scoped analysis.

    Holds no mutable state of its own; the store is the only shared resource.
    """

    def __init__(
        self,
        scorer: Scorer,
        store: ResultStore,
        scorer_config: ScorerConfig | None = None,
        flag_threshold: float = DEFAULT_FLAG_THRESHOLD,
        normalization_constant: float = DEFAULT_NORMALIZATION_CONSTANT,
        min_length: int = 10,
        value_column: int = 1,
        scorer_type: str | None = None,
    ):
        """
        Initialize the service.

        Args:
            scorer: Port to the external scorer
            store: Port to persist records
            scorer_config: Seed and parameters passed to the scorer
            flag_threshold: Exclusive confidence threshold for flags
            normalization_constant: Divergence mapped to confidence 1.0
            min_length: Minimum analyzable series length
            value_column: Zero-based CSV column holding the values
            scorer_type: Name recorded in each record's parameters
        """
        self.scorer = scorer
        self.store = store
        self.scorer_config = scorer_config or ScorerConfig()
        self.flag_threshold = flag_threshold
        self.normalization_constant = normalization_constant
        self.min_length = min_length
        self.value_column = value_column
        self.scorer_type = scorer_type or scorer.name

    async def analyze_upload(self, owner: str, filename: str, raw: bytes) -> AnalysisOutcome:
        """
        Execute decode, score, extract and create for one upload.

        Nothing is persisted unless every stage succeeds.
        """
        series = decode_series(
            decode_bytes(raw),
            value_column=self.value_column,
            min_length=self.min_length,
        )
        logger.info(f"Decoded '{filename}' for owner {owner}: {len(series)} samples")

        flags, parameters = await self._derive(series, self.scorer_config, self.flag_threshold)
        record_id = await self.store.create(owner, filename, series, flags, parameters)

        return AnalysisOutcome(
            record_id=record_id,
            filename=filename,
            anomaly_indices=[flag.index for flag in flags],
            confidence_scores=[flag.confidence for flag in flags],
        )

    async def rescore(
        self,
        owner: str,
        record_id: str,
        threshold: float | None = None,
        scorer_overrides: dict[str, Any] | None = None,
    ) -> AnalysisOutcome:
        """
        Re-derive a stored record under a changed configuration.

        The stored series is scored again and a new record is created; the
        source record is left untouched.
        """
        source = await self.store.get(owner, record_id)

        config = self.scorer_config
        if scorer_overrides:
            config = dataclasses.replace(config, **scorer_overrides)
        flag_threshold = self.flag_threshold if threshold is None else threshold

        logger.info(f"Rescoring result {record_id} for owner {owner} (threshold={flag_threshold})")
        flags, parameters = await self._derive(source.series, config, flag_threshold)
        parameters["derived_from"] = source.record_id

        new_id = await self.store.create(owner, source.filename, source.series, flags, parameters)
        return AnalysisOutcome(
            record_id=new_id,
            filename=source.filename,
            anomaly_indices=[flag.index for flag in flags],
            confidence_scores=[flag.confidence for flag in flags],
        )

    async def history(self, owner: str) -> list[RecordSummary]:
        """Return the owner's record summaries, most recent first."""
        return await self.store.list_by_owner(owner)

    async def download(self, owner: str, record_id: str) -> str:
        """Return the stored record as CSV text."""
        record = await self.store.get(owner, record_id)
        return encode_record(record)

    async def aclose(self) -> None:
        """Release the scorer's resources, e.g. the remote HTTP client."""
        close = getattr(self.scorer, "close", None)
        if close is not None:
            await close()

    async def _derive(
        self,
        series: TimeSeries,
        config: ScorerConfig,
        flag_threshold: float,
    ) -> tuple[tuple[AnomalyFlag, ...], dict[str, Any]]:
        try:
            score_lines = await self.scorer.score(series, config)
        except ScorerContractViolation as e:
            logger.error(f"Scorer contract violation ({self.scorer_type}): {e.message}")
            raise

        flags = extract_anomalies(score_lines, flag_threshold, self.normalization_constant)
        logger.info(f"Extracted {len(flags)} anomalies from {len(score_lines)} scores")

        parameters = {
            "scorer": self.scorer_type,
            "scorer_config": config.as_dict(),
            "flag_threshold": flag_threshold,
            "normalization_constant": self.normalization_constant,
        }
        return flags, parameters
