import logging
from asgiref.sync import async_to_sync
from django.conf import settings
from rnseanomaly.common.dataclasses import ScorerConfig
from rnseanomaly.common.interfaces.result_store import ResultStore
from rnseanomaly.common.interfaces.scorer import Scorer
from rnseanomaly.config.schema import AnalysisSettings, ScorerSettings, StoreSettings

logger = logging.getLogger(__name__)


def get_scorer_settings() -> ScorerSettings:
    return ScorerSettings(**settings.SCORER)


def get_analysis_settings() -> AnalysisSettings:
    return AnalysisSettings(**settings.ANALYSIS)


def get_scorer_config(scorer_settings: ScorerSettings | None = None) -> ScorerConfig:
    s = scorer_settings or get_scorer_settings()
    return ScorerConfig(seed=s.seed, threshold=s.threshold, window=s.window, smoothing=s.smoothing)


def get_scorer(scorer_settings: ScorerSettings | None = None) -> Scorer:
    """
    Factory to create the configured scorer adapter.
    """
    s = scorer_settings or get_scorer_settings()

    if s.type == "remote":
        from rnseanomaly.common.adapters.scorers.remote import RemoteScorer
        if not s.endpoint:
            raise ValueError("Endpoint required for remote scorer")
        return RemoteScorer(endpoint=s.endpoint, timeout=s.timeout, divergence_field=s.divergence_field)

    if s.type == "baseline":
        from rnseanomaly.common.adapters.scorers.baseline import BaselineScorer
        return BaselineScorer(divergence_field=s.divergence_field)

    from rnseanomaly.common.adapters.scorers.rnse_core import RnseCoreScorer
    return RnseCoreScorer(divergence_field=s.divergence_field)


_memory_store = None


def get_result_store() -> ResultStore:
    """
    Factory to create the configured result store.

    The memory store is shared by every request in the process; records are
    lost on restart.
    """
    global _memory_store
    store_settings = StoreSettings(**getattr(settings, "RESULT_STORE", {}))

    if store_settings.type == "memory":
        from rnseanomaly.common.adapters.stores.memory import MemoryResultStore
        if _memory_store is None:
            _memory_store = MemoryResultStore()
        return _memory_store

    from rnseanomaly.config.django_store import DjangoResultStore
    return DjangoResultStore()


def call_service(service, func, *args, **kwargs):
    """
    Run one service coroutine from sync code and close the service afterwards.

    async_to_sync gives every call its own event loop, so clients opened
    during the call must be closed before it returns.
    """
    async def _call():
        try:
            return await func(*args, **kwargs)
        finally:
            await service.aclose()

    return async_to_sync(_call)()


def build_analysis_service():
    """
    Wire the analysis service from Django settings.
    """
    from rnseanomaly.analyses.service import AnalysisService

    scorer_settings = get_scorer_settings()
    analysis = get_analysis_settings()
    logger.debug(f"Building analysis service with scorer '{scorer_settings.type}'")
    return AnalysisService(
        scorer=get_scorer(scorer_settings),
        store=get_result_store(),
        scorer_config=get_scorer_config(scorer_settings),
        flag_threshold=analysis.flag_threshold,
        normalization_constant=analysis.normalization_constant,
        min_length=analysis.min_length,
        value_column=analysis.value_column,
        scorer_type=scorer_settings.type,
    )
