from django.contrib import admin
from .models import AnalysisRecord


@admin.register(AnalysisRecord)
class AnalysisRecordAdmin(admin.ModelAdmin):
    """
    Read-only admin for analysis records. Records are write-once.
    """

    list_display = ['filename', 'owner', 'anomaly_count', 'sample_count', 'created_at']
    list_filter = ['created_at']
    search_fields = ['filename', 'owner', 'record_id']
    ordering = ['-created_at']
    readonly_fields = [
        'record_id', 'owner', 'filename', 'values', 'labels',
        'flags', 'anomaly_count', 'parameters', 'created_at',
    ]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
