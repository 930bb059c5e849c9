"""Shared fixtures for search service tests."""

import sys
from pathlib import Path
from typing import List

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from libs.common.models import Document
from libs.document_store.memory import InMemoryDocumentStore


@pytest.fixture
def red_car_corpus() -> List[Document]:
    """Two-document corpus where only the first mentions red cars."""
    return [
        Document(id=1, title="Red Car", content="A fast red car"),
        Document(id=2, title="Blue Sky", content="A clear blue sky"),
    ]


@pytest.fixture
def corpus() -> List[Document]:
    """Small corpus used by search manager and API tests."""
    return [
        Document(id=1, title="Red Car", content="A fast red car", url="https://example.com/1"),
        Document(id=2, title="Blue Sky", content="A clear blue sky", url="https://example.com/2"),
        Document(id=3, title="Red Rose", content="A red rose in the garden", url="https://example.com/3"),
        Document(id=4, title="Green Tree", content="A tall green tree", url="https://example.com/4"),
    ]


@pytest.fixture
def memory_store(corpus) -> InMemoryDocumentStore:
    return InMemoryDocumentStore(corpus)
