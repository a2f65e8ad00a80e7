import pytest

from rnseanomaly.common.adapters.scorers.baseline import BaselineScorer
from rnseanomaly.common.adapters.scorers.remote import RemoteScorer
from rnseanomaly.common.adapters.scorers.rnse_core import RnseCoreScorer
from rnseanomaly.common.adapters.stores.memory import MemoryResultStore
from rnseanomaly.config.django_store import DjangoResultStore
from rnseanomaly.config.schema import ScorerSettings
from rnseanomaly.config.utils import build_analysis_service, get_result_store, get_scorer


@pytest.fixture(autouse=True)
def fresh_memory_store(monkeypatch):
    monkeypatch.setattr("rnseanomaly.config.utils._memory_store", None)


def test_default_store_is_django(settings):
    settings.RESULT_STORE = {"type": "django"}
    assert isinstance(get_result_store(), DjangoResultStore)


def test_memory_store_is_shared_by_the_process(settings):
    settings.RESULT_STORE = {"type": "memory"}

    store = get_result_store()

    assert isinstance(store, MemoryResultStore)
    assert get_result_store() is store


def test_service_uses_configured_store(settings):
    settings.RESULT_STORE = {"type": "memory"}
    settings.SCORER = {**settings.SCORER, "type": "baseline"}

    service = build_analysis_service()

    assert service.store is get_result_store()
    assert isinstance(service.scorer, BaselineScorer)
    assert service.scorer_type == "baseline"


def test_scorer_factory():
    assert isinstance(get_scorer(ScorerSettings(type="rnse_core")), RnseCoreScorer)
    remote = get_scorer(ScorerSettings(type="remote", endpoint="http://scorer:9000/score", timeout=5))
    assert isinstance(remote, RemoteScorer)
    assert remote.timeout == 5

    with pytest.raises(ValueError):
        get_scorer(ScorerSettings(type="remote"))
