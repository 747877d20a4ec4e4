import os
from pathlib import Path

import pytest

# Test directory name → marker applied to every test collected under it
_MARKERS_BY_LAYER = {
    "domain": pytest.mark.domain,
    "application": pytest.mark.application,
    "bdd": pytest.mark.bdd,
    "integration": pytest.mark.integration,
}


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Domain configuration overlay (PROTEAN_ENV) to run the suite against",
    )


def pytest_sessionstart(session):
    """Initialize the commerce domain once and keep its context active for the whole run."""
    os.environ["PROTEAN_ENV"] = session.config.option.env

    from commerce.domain import commerce

    commerce.init()
    commerce.domain_context().push()


def pytest_collection_modifyitems(config, items):
    for item in items:
        layers = set(Path(item.fspath).parts)
        for layer, marker in _MARKERS_BY_LAYER.items():
            if layer in layers:
                item.add_marker(marker)
                break

        if "integration" in layers and not any(m.name == "fast" for m in item.iter_markers()):
            item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session", autouse=True)
def setup_db():
    from commerce.domain import commerce
    from commerce.utils import db

    db.setup_db(commerce)
    yield
    db.drop_db(commerce)


@pytest.fixture(autouse=True)
def run_around_tests():
    """Wipe every provider and the event store after each test."""
    yield

    from protean import current_domain

    for provider in current_domain.providers.values():
        provider._data_reset()
    current_domain.event_store.store._data_reset()
