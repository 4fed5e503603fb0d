import pytest
from fastapi.testclient import TestClient

from main import create_app


@pytest.fixture()
def client(registry):
    """API client wired to the in-process providers of the ``registry`` fixture."""

    with TestClient(create_app(provider_registry=registry)) as test_client:
        yield test_client
