"""
Pytest configuration for RNSE Anomaly tests.
"""
import pytest
from rest_framework.authtoken.models import Token
from rest_framework.test import APIClient


@pytest.fixture(autouse=True)
def enable_db_access_for_all_tests(db):
    """Enable database access for all tests automatically."""
    pass


@pytest.fixture
def make_csv():
    """Build an uploaded CSV payload from a list of values."""
    def _make(values, header="timestamp,value"):
        rows = [header]
        for i, v in enumerate(values, start=1):
            rows.append(f"2024-01-01T00:{i // 60:02d}:{i % 60:02d},{v}")
        return "\n".join(rows) + "\n"
    return _make


@pytest.fixture
def spike_values():
    """100 samples at 10.0 with rows 40-45 raised to 15.5."""
    values = [10.0] * 100
    for index in range(40, 46):
        values[index - 1] = 15.5
    return values


@pytest.fixture
def baseline_scorer(settings):
    """Route the service to the deterministic local scorer."""
    settings.SCORER = {**settings.SCORER, "type": "baseline", "threshold": 0.25}
    return settings.SCORER


@pytest.fixture
def user(django_user_model):
    return django_user_model.objects.create_user(
        username="alice@example.com", email="alice@example.com", password="correct-horse"
    )


@pytest.fixture
def other_user(django_user_model):
    return django_user_model.objects.create_user(
        username="bob@example.com", email="bob@example.com", password="battery-staple"
    )


def _client_for(user):
    token, _ = Token.objects.get_or_create(user=user)
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token.key}")
    return client


@pytest.fixture
def api_client(user):
    return _client_for(user)


@pytest.fixture
def other_client(other_user):
    return _client_for(other_user)
