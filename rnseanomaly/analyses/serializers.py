from rest_framework import serializers


class UploadResultSerializer(serializers.Serializer):
    """
    Summary of a completed upload, shaped for the dashboard chart.
    """
    result_id = serializers.CharField(source="record_id")
    filename = serializers.CharField()
    anomaly_count = serializers.IntegerField()
    anomaly_indices = serializers.ListField(child=serializers.IntegerField())
    confidence_scores = serializers.ListField(child=serializers.FloatField())


class RecordSummarySerializer(serializers.Serializer):
    id = serializers.CharField(source="record_id")
    filename = serializers.CharField()
    anomaly_count = serializers.IntegerField()
    uploaded_at = serializers.DateTimeField(source="created_at")


class RescoreRequestSerializer(serializers.Serializer):
    threshold = serializers.FloatField(required=False, min_value=0.0, max_value=1.0)
    scorer_threshold = serializers.FloatField(required=False)
    window = serializers.IntegerField(required=False, min_value=1)
    smoothing = serializers.FloatField(required=False, allow_null=True, min_value=0.0, max_value=1.0)

    def validate_smoothing(self, value):
        if value == 0.0:
            raise serializers.ValidationError("smoothing must be greater than 0")
        return value

    def scorer_overrides(self) -> dict:
        data = self.validated_data
        overrides = {}
        if "scorer_threshold" in data:
            overrides["threshold"] = data["scorer_threshold"]
        if "window" in data:
            overrides["window"] = data["window"]
        if "smoothing" in data:
            overrides["smoothing"] = data["smoothing"]
        return overrides
