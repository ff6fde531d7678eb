import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from kvwiki.core.keys import Keys
from kvwiki.storage import MemoryStore, PageRepository


@pytest.fixture(scope="session")
def qapp():
    """Event loop for QTimer/QObject based pieces; no widgets needed."""
    from PySide6.QtCore import QCoreApplication

    return QCoreApplication.instance() or QCoreApplication([])


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def repo(store) -> PageRepository:
    return PageRepository(store)


@pytest.fixture
def home_keys() -> Keys:
    return Keys("", "home")
