"""
ResultStore Port - Interface for persisting analysis records.

Records are write-once and owner-partitioned. Implementations can be
in-memory or backed by the Django ORM.
"""

from abc import ABC, abstractmethod
from typing import Any

from rnseanomaly.common.dataclasses import (
    AnalysisRecord,
    AnomalyFlag,
    RecordSummary,
    TimeSeries,
)


class ResultStore(ABC):
    """
    Abstract interface for analysis record storage.

    Implementations:
    - MemoryResultStore: process-local storage
    - DjangoResultStore: Django ORM (SQLite, Postgres)
    """

    @abstractmethod
    async def create(
        self,
        owner: str,
        filename: str,
        series: TimeSeries,
        flags: tuple[AnomalyFlag, ...],
        parameters: dict[str, Any] | None = None,
    ) -> str:
        """
        Persist a new record atomically.

        Args:
            owner: Opaque, pre-validated owner identity
            filename: Original upload filename
            series: Input series, stored verbatim
            flags: Ordered anomaly flags
            parameters: Scorer and extraction settings used

        Returns:
            The new record id
        """
        ...

    @abstractmethod
    async def get(self, owner: str, record_id: str) -> AnalysisRecord:
        """
        Fetch a record belonging to ``owner``.

        Raises:
            NotFound: the record is missing or owned by someone else
        """
        ...

    @abstractmethod
    async def list_by_owner(self, owner: str) -> list[RecordSummary]:
        """
        List the owner's records, most recent first.

        Returns:
            Summaries without series or flags
        """
        ...
