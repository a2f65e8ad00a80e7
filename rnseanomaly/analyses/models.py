import uuid

from django.db import models


class AnalysisRecord(models.Model):
    """
    Persisted outcome of one upload-and-score run.

    Rows are written once and never updated. The series and flags are stored
    as JSON on the same row, so a record is committed in a single insert.
    ``anomaly_count`` is denormalized for history listings.
    """

    # ===== Identity =====
    record_id = models.UUIDField(
        default=uuid.uuid4,
        unique=True,
        editable=False,
        help_text="Public identifier used by history and download"
    )
    owner = models.CharField(
        max_length=255,
        db_index=True,
        help_text="Opaque identity of the owning user"
    )
    filename = models.CharField(
        max_length=255,
        help_text="Original upload filename"
    )

    # ===== Payload =====
    values = models.JSONField(
        help_text="Input series, verbatim and in order"
    )
    labels = models.JSONField(
        null=True,
        blank=True,
        help_text="First CSV column carried alongside the values"
    )
    flags = models.JSONField(
        default=list,
        help_text="Ordered [index, confidence] pairs"
    )
    anomaly_count = models.PositiveIntegerField(default=0)
    parameters = models.JSONField(
        default=dict,
        blank=True,
        help_text="Scorer and extraction settings used for this run"
    )

    # ===== Metadata =====
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['owner', '-created_at'], name='analysis_owner_recent_idx'),
        ]
        verbose_name = 'Analysis record'
        verbose_name_plural = 'Analysis records'

    def __str__(self):
        return f"{self.filename} ({self.record_id})"

    @property
    def sample_count(self):
        return len(self.values or [])
