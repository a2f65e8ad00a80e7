import pytest
from pydantic import ValidationError

from rnseanomaly.config.loader import load_app_config
from rnseanomaly.config.schema import AnalysisSettings, AppConfig, ScorerSettings


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    for name in ("REDIS_URL", "RNSE_SECRET_KEY", "RNSE_DATABASE_TYPE", "RNSE_SCORER_TYPE", "RNSE_SCORER_ENDPOINT", "RNSE_STORE_TYPE"):
        monkeypatch.delenv(name, raising=False)


def test_app_config_defaults():
    config = AppConfig()
    assert config.redis.url == "redis://localhost:6379/0"
    assert config.django.database_type == "sqlite"
    assert config.scorer.type == "rnse_core"
    assert config.scorer.seed == 42
    assert config.scorer.divergence_field == "D"
    assert config.analysis.flag_threshold == 0.3
    assert config.analysis.normalization_constant == 1.0
    assert config.analysis.min_length == 10
    assert config.store.type == "django"
    assert config.django.cors_allowed_origins == ["http://localhost:3000"]


def test_normalization_constant_must_be_positive():
    with pytest.raises(ValidationError):
        AnalysisSettings(normalization_constant=0)
    with pytest.raises(ValidationError):
        AnalysisSettings(normalization_constant=float("inf"))


def test_unknown_scorer_type_rejected():
    with pytest.raises(ValidationError):
        ScorerSettings(type="magic")


def test_load_from_env(monkeypatch):
    monkeypatch.setenv("REDIS_URL", "redis://custom:6379/1")
    monkeypatch.setenv("RNSE_SCORER_TYPE", "remote")
    monkeypatch.setenv("RNSE_SCORER_ENDPOINT", "http://scorer:9000/score")

    config = load_app_config(path="non_existent.yaml")

    assert config.redis.url == "redis://custom:6379/1"
    assert config.scorer.type == "remote"
    assert config.scorer.endpoint == "http://scorer:9000/score"


def test_load_from_file(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("""
scorer:
  type: baseline
  window: 11
analysis:
  flag_threshold: 0.5
""")

    config = load_app_config(path=config_file)

    assert config.scorer.type == "baseline"
    assert config.scorer.window == 11
    assert config.analysis.flag_threshold == 0.5
    # Defaults preserved
    assert config.scorer.seed == 42
    assert config.redis.url == "redis://localhost:6379/0"


def test_env_overrides_file(tmp_path, monkeypatch):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("scorer:\n  type: baseline\n")
    monkeypatch.setenv("RNSE_SCORER_TYPE", "rnse_core")

    config = load_app_config(path=config_file)

    assert config.scorer.type == "rnse_core"


def test_invalid_file_raises(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("analysis:\n  normalization_constant: -1\n")

    with pytest.raises(RuntimeError, match="Invalid configuration"):
        load_app_config(path=config_file)


def test_non_mapping_file_raises(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("- just\n- a list\n")

    with pytest.raises(RuntimeError, match="must be a mapping"):
        load_app_config(path=config_file)


def test_store_and_cors_from_file(tmp_path, monkeypatch):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("""
django:
  cors_allowed_origins: ["https://dashboard.example.com"]
store:
  type: memory
""")

    config = load_app_config(path=config_file)

    assert config.django.cors_allowed_origins == ["https://dashboard.example.com"]
    assert config.store.type == "memory"

    monkeypatch.setenv("RNSE_STORE_TYPE", "django")
    assert load_app_config(path=config_file).store.type == "django"
