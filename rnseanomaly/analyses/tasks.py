import logging

from celery import shared_task

from rnseanomaly.common.exceptions import AnalysisError
from rnseanomaly.config.utils import build_analysis_service, call_service

logger = logging.getLogger(__name__)


@shared_task(name="rnseanomaly.tasks.rescore_record")
def rescore_record_task(
    owner: str,
    record_id: str,
    threshold: float | None = None,
    scorer_overrides: dict | None = None,
):
    """
    Background task to re-derive a stored result under a new configuration.

    Returns the new record id. Pipeline errors are logged and reported in the
    task result rather than retried; rerunning the same input gives the same
    outcome.
    """
    logger.info(f"Starting RESCORE task for result {record_id}")
    service = build_analysis_service()

    try:
        outcome = call_service(
            service,
            service.rescore,
            owner,
            record_id,
            threshold=threshold,
            scorer_overrides=scorer_overrides,
        )
    except AnalysisError as e:
        logger.error(f"Rescore of {record_id} failed ({e.code}): {e.message}")
        return {"status": "error", "code": e.code, "detail": e.message}

    logger.info(f"Rescore of {record_id} stored as {outcome.record_id}")
    return {
        "status": "success",
        "result_id": outcome.record_id,
        "anomaly_count": outcome.anomaly_count,
    }
