import faulthandler
import sys
import time
from pathlib import Path

import pytest

from inventory.app_context import AppContext
from inventory.config import Config
from inventory.database import InventoryDatabase

# =============================================================================
# Global singleton reset fixture for test isolation
# =============================================================================


@pytest.fixture(autouse=True)
def reset_database_singleton():
    """
    Close and forget the shared InventoryDatabase after each test.

    No test can leak the process-wide database (or its executor threads)
    into another test.
    """
    yield
    InventoryDatabase.reset_for_testing()


@pytest.fixture(autouse=True)
def isolated_data_dir(monkeypatch):
    """Tests never see a developer's INVENTORY_DATA_DIR."""
    monkeypatch.delenv("INVENTORY_DATA_DIR", raising=False)


@pytest.fixture
def temp_config(tmp_path):
    """
    Provide a fresh Config stored under tmp_path.

    This fixture GUARANTEES a clean config or fails loudly.
    """
    config_path = tmp_path / f"config_{time.time_ns()}.json"
    config = Config(config_file=config_path)

    assert config.data_dir == config_path.parent / "data", \
        f"FIXTURE CONTAMINATED! data_dir={config.data_dir}"
    assert config.journal_mode == "WAL", \
        f"FIXTURE CONTAMINATED! journal_mode={config.journal_mode}"

    return config


@pytest.fixture
def app_context(temp_config):
    return AppContext(config=temp_config)


@pytest.fixture
def temp_db(tmp_path):
    db_path = tmp_path / f"db_{time.time_ns()}" / "item_database"
    db = InventoryDatabase(db_path=db_path)
    yield db
    db.close()


@pytest.fixture
def dao(temp_db):
    return temp_db.item_dao()


def pytest_collection_modifyitems(config, items):
    """Assign tier markers based on test location."""
    slow_files = {
        "test_concurrent_access.py",
    }

    for item in items:
        path = Path(str(item.fspath)).as_posix()
        filename = Path(path).name

        if "/tests/integration/" in path:
            item.add_marker(pytest.mark.integration)
        elif "/tests/unit/" in path:
            item.add_marker(pytest.mark.unit)

        if filename in slow_files:
            item.add_marker(pytest.mark.slow)


def pytest_sessionstart(session):  # pragma: no cover - test harness init
    """Enable faulthandler so pytest-timeout dumps every thread on a hang."""
    try:
        faulthandler.enable(file=sys.stderr, all_threads=True)
    except (RuntimeError, ValueError):
        pass
