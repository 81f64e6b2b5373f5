"""Shared fixtures for the BIDFLOW matcher test suite."""

import pytest

from bidflow.config.loader import load_default_catalog
from bidflow.config.models import Catalog, PipeSizeRange, Product
from bidflow.domain.models import Announcement
from bidflow.logging.context import clear_log_context


@pytest.fixture(autouse=True)
def clean_log_context():
    """Clear logging context before and after each test."""
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture(scope="session")
def default_catalog() -> Catalog:
    """The packaged five-product catalog."""
    return load_default_catalog()


@pytest.fixture
def simple_product() -> Product:
    """A small product with one keyword of each kind."""
    return Product(
        id="TEST-1",
        name="Test Flowmeter",
        category="flowmeter",
        pipe_size=PipeSizeRange(min_mm=100, max_mm=1000),
        strong_keywords=["flowmeter"],
        weak_keywords=["meter", "water"],
        exclude_keywords=["heat"],
        target_organizations=["acme utility"],
    )


@pytest.fixture
def simple_catalog(simple_product) -> Catalog:
    """Single-product catalog with default weights and thresholds."""
    return Catalog(version="test-1", products=[simple_product])


@pytest.fixture
def make_announcement():
    """Factory for announcements with sensible defaults."""

    def _make(title="", organization="", description=None, estimated_price=None, id="test"):
        return Announcement(
            id=id,
            title=title,
            organization=organization,
            description=description,
            estimated_price=estimated_price,
        )

    return _make
