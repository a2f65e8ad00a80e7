import logging
from django.http import HttpResponse
from rest_framework import status
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema

from rnseanomaly.analyses.serializers import (
    RecordSummarySerializer,
    RescoreRequestSerializer,
    UploadResultSerializer,
)
from rnseanomaly.analyses.tasks import rescore_record_task
from rnseanomaly.common.exceptions import (
    AnalysisError,
    MalformedInput,
    NotFound,
    ScorerContractViolation,
    ScorerUnavailable,
)
from rnseanomaly.config.utils import build_analysis_service, call_service, get_analysis_settings

logger = logging.getLogger(__name__)

DOWNLOAD_FILENAME = "rnse_results.csv"

ERROR_SCHEMA = {"type": "object", "properties": {"detail": {"type": "string"}, "code": {"type": "string"}}}

# Most specific first: InsufficientData is a MalformedInput.
ERROR_STATUS = [
    (NotFound, status.HTTP_404_NOT_FOUND),
    (MalformedInput, status.HTTP_400_BAD_REQUEST),
    (ScorerUnavailable, status.HTTP_503_SERVICE_UNAVAILABLE),
    (ScorerContractViolation, status.HTTP_502_BAD_GATEWAY),
]


def error_response(exc: AnalysisError) -> Response:
    """Turn a pipeline error into the caller-visible response."""
    for error_type, code in ERROR_STATUS:
        if isinstance(exc, error_type):
            return Response({"detail": exc.message, "code": exc.code}, status=code)
    return Response({"detail": exc.message, "code": exc.code}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


def owner_of(request) -> str:
    """Opaque owner identity for the authenticated user."""
    return str(request.user.pk)


class UploadView(APIView):
    """
    Upload a CSV time series and analyze it
    """
    parser_classes = [MultiPartParser, FormParser]

    @extend_schema(
        summary="Upload and analyze",
        description="Decode the uploaded CSV, score it, flag anomalies and store the result",
        request={"multipart/form-data": {"type": "object", "properties": {"file": {"type": "string", "format": "binary"}}}},
        responses={201: UploadResultSerializer, 400: ERROR_SCHEMA, 413: ERROR_SCHEMA, 502: ERROR_SCHEMA, 503: ERROR_SCHEMA}
    )
    def post(self, request):
        upload = request.FILES.get("file")
        if upload is None:
            return Response({"detail": "No file uploaded", "code": "missing_file"}, status=status.HTTP_400_BAD_REQUEST)

        limit = get_analysis_settings().max_upload_bytes
        if upload.size > limit:
            return Response(
                {"detail": f"File exceeds {limit} bytes", "code": "too_large"},
                status=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            )

        service = build_analysis_service()
        try:
            outcome = call_service(service, service.analyze_upload, owner_of(request), upload.name, upload.read())
        except AnalysisError as e:
            logger.warning(f"Upload '{upload.name}' rejected ({e.code}): {e.message}")
            return error_response(e)
        except Exception:
            logger.exception("Upload analysis failed")
            return Response(
                {"detail": "Analysis failed unexpectedly", "code": "internal_error"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        return Response(UploadResultSerializer(outcome).data, status=status.HTTP_201_CREATED)


class ResultListView(APIView):
    """
    History of the caller's analyses
    """
    @extend_schema(
        summary="List results",
        responses={200: {"type": "object", "properties": {"results": {"type": "array", "items": {"type": "object"}}}}}
    )
    def get(self, request):
        service = build_analysis_service()
        summaries = call_service(service, service.history, owner_of(request))
        return Response({"results": RecordSummarySerializer(summaries, many=True).data})


class ResultDownloadView(APIView):
    """
    Download a stored result as CSV
    """
    @extend_schema(
        summary="Download result CSV",
        responses={(200, "text/csv"): {"type": "string"}, 404: ERROR_SCHEMA}
    )
    def get(self, request, result_id):
        service = build_analysis_service()
        try:
            body = call_service(service, service.download, owner_of(request), result_id)
        except AnalysisError as e:
            return error_response(e)

        response = HttpResponse(body, content_type="text/csv")
        response["Content-Disposition"] = f'attachment; filename="{DOWNLOAD_FILENAME}"'
        return response


class ResultRescoreView(APIView):
    """
    Re-derive a stored result with a different configuration
    """
    @extend_schema(
        summary="Rescore result",
        description="Queue a background rescore; the outcome is stored as a new result",
        request=RescoreRequestSerializer,
        responses={202: {"type": "object", "properties": {"message": {"type": "string"}, "task_id": {"type": "string"}}}, 404: ERROR_SCHEMA}
    )
    def post(self, request, result_id):
        serializer = RescoreRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({"detail": serializer.errors, "code": "invalid_request"}, status=status.HTTP_400_BAD_REQUEST)

        owner = owner_of(request)
        service = build_analysis_service()
        try:
            # Reject unknown or foreign ids before queueing anything
            call_service(service, service.store.get, owner, result_id)
        except AnalysisError as e:
            return error_response(e)

        task = rescore_record_task.delay(
            owner,
            str(result_id),
            threshold=serializer.validated_data.get("threshold"),
            scorer_overrides=serializer.scorer_overrides() or None,
        )
        return Response({"message": "Rescore triggered", "task_id": str(task.id)}, status=status.HTTP_202_ACCEPTED)
