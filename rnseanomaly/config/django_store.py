import logging
import uuid
from typing import Any

from asgiref.sync import sync_to_async
from django.db import transaction

from rnseanomaly.analyses.models import AnalysisRecord as RecordModel
from rnseanomaly.common.dataclasses import (
    AnalysisRecord,
    AnomalyFlag,
    RecordSummary,
    TimeSeries,
)
from rnseanomaly.common.exceptions import NotFound
from rnseanomaly.common.interfaces.result_store import ResultStore

logger = logging.getLogger(__name__)


class DjangoResultStore(ResultStore):
    """
    Django ORM implementation of ResultStore.
    Works with any database supported by Django (SQLite, Postgres, etc).
    """

    async def create(
        self,
        owner: str,
        filename: str,
        series: TimeSeries,
        flags: tuple[AnomalyFlag, ...],
        parameters: dict[str, Any] | None = None,
    ) -> str:
        """
        Insert the record in one transaction.
        """
        instance = await sync_to_async(self._create)(owner, filename, series, flags, parameters or {})
        logger.info(f"Stored result {instance.record_id} for owner {owner} ({instance.anomaly_count} anomalies)")
        return str(instance.record_id)

    def _create(self, owner, filename, series, flags, parameters) -> RecordModel:
        with transaction.atomic():
            return RecordModel.objects.create(
                owner=owner,
                filename=filename,
                values=list(series.values),
                labels=list(series.labels) if series.labels is not None else None,
                flags=[[flag.index, flag.confidence] for flag in flags],
                anomaly_count=len(flags),
                parameters=parameters,
            )

    async def get(self, owner: str, record_id: str) -> AnalysisRecord:
        """
        Retrieve a record, scoped to its owner.

        A foreign record is reported exactly like a missing one.
        """
        try:
            key = uuid.UUID(str(record_id))
        except ValueError:
            raise NotFound(f"Result '{record_id}' not found")

        try:
            instance = await RecordModel.objects.aget(record_id=key, owner=owner)
        except RecordModel.DoesNotExist:
            raise NotFound(f"Result '{record_id}' not found")

        return self._to_dataclass(instance)

    async def list_by_owner(self, owner: str) -> list[RecordSummary]:
        """
        List summaries, newest first, without loading series payloads.
        """
        rows = RecordModel.objects.filter(owner=owner).order_by('-created_at', '-id').values(
            'record_id', 'filename', 'anomaly_count', 'created_at'
        )
        return [
            RecordSummary(
                record_id=str(row['record_id']),
                filename=row['filename'],
                anomaly_count=row['anomaly_count'],
                created_at=row['created_at'],
            )
            async for row in rows
        ]

    def _to_dataclass(self, instance: RecordModel) -> AnalysisRecord:
        """
        Convert Django Model instance to AnalysisRecord dataclass.
        """
        labels = tuple(instance.labels) if instance.labels is not None else None
        return AnalysisRecord(
            record_id=str(instance.record_id),
            owner=instance.owner,
            filename=instance.filename,
            series=TimeSeries(values=tuple(float(v) for v in instance.values), labels=labels),
            flags=tuple(AnomalyFlag(index=int(i), confidence=float(c)) for i, c in instance.flags),
            created_at=instance.created_at,
            parameters=dict(instance.parameters or {}),
        )
