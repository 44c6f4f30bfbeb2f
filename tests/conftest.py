from datetime import date
from decimal import Decimal

import pytest

from api import create_app
from models import CatalogService, FileStorage


@pytest.fixture
def storage(tmp_path):
    """JSON storage in a temporary directory."""
    engine = FileStorage(tmp_path / "data")
    engine.reload()
    return engine


@pytest.fixture
def service(storage):
    return CatalogService(storage)


@pytest.fixture
def refs(service):
    """One publisher, two authors and two categories ready to reference."""
    return {
        "publisher": service.register_publisher("Companhia das Letras"),
        "machado": service.register_author("Machado de Assis", "Brazilian", date(1839, 6, 21)),
        "clarice": service.register_author("Clarice Lispector", "Brazilian", date(1920, 12, 10)),
        "novel": service.register_category("Novel"),
        "poetry": service.register_category("Poetry"),
    }


@pytest.fixture
def make_book(service, refs):
    """Register a valid book; keyword arguments override the defaults."""

    def _make(**overrides):
        values = dict(
            title="Dom Casmurro",
            price=Decimal("39.90"),
            stock=5,
            publisher=refs["publisher"],
            page_count=256,
            isbn="978-85-359-0277-1",
            authors=[refs["machado"]],
            category=refs["novel"],
        )
        values.update(overrides)
        return service.register_book(**values)

    return _make


@pytest.fixture
def make_newspaper(service, refs):
    def _make(**overrides):
        values = dict(
            title="Folha da Manhã",
            price=Decimal("4.50"),
            stock=20,
            publisher=refs["publisher"],
            publication_date=date(2024, 3, 1),
        )
        values.update(overrides)
        return service.register_newspaper(**values)

    return _make


@pytest.fixture
def app(tmp_path):
    return create_app("testing", overrides={"STORAGE_TYPE": "file", "DATA_DIR": str(tmp_path / "api-data")})


@pytest.fixture
def client(app):
    return app.test_client()
