"""Root pytest configuration for minigit tests."""
import pytest

from minigit.repository import init_repository
from minigit.settings import Settings
from minigit.storage.object_store import ObjectStore

HELLO_BLOB_ID = "ce013625030ba8dba906f756967f9e9ca394464a"
EMPTY_BLOB_ID = "e69de29bb2d1d6434b8b29ae775ad8c2e48c5391"
EMPTY_TREE_ID = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"


# Configure pytest markers
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers",
        "slow: mark test as slow (may take significant time)"
    )


@pytest.fixture
def work_tree(tmp_path):
    """Empty work tree directory."""
    path = tmp_path / "work"
    path.mkdir()
    return path


# Point the CLI at the per-test work tree
@pytest.fixture(autouse=True)
def test_env(monkeypatch, work_tree):
    """Automatically set up test environment variables."""
    monkeypatch.setenv("MINIGIT_WORK_TREE", str(work_tree))
    for key in ("MINIGIT_DIR", "MINIGIT_COMPRESSION_LEVEL", "MINIGIT_DIR_MODE",
                "MINIGIT_FILE_MODE", "MINIGIT_DEFAULT_BRANCH"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def settings(work_tree):
    """Standard test settings."""
    return Settings(work_tree=work_tree)


@pytest.fixture
def store(settings):
    """Object store in an initialized repository."""
    init_repository(settings)
    return ObjectStore.from_settings(settings)
