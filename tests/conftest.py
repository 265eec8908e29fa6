import random

import pytest
from fastapi.testclient import TestClient

from app.core.geo import GeoPoint
from app.main import app
from app.services.benchmark import random_points_in_disk

# Marienplatz, Munich
MUNICH = GeoPoint(11.575, 48.137)


@pytest.fixture(scope="function")
def client():
    """Create a test client."""
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def rng():
    """Seeded RNG so generated point sets are reproducible."""
    return random.Random(1234)


@pytest.fixture
def munich_points(rng):
    """1000 synthetic points spread over 4.5 km around Munich."""
    return random_points_in_disk(MUNICH, 4500, 1000, rng)
