# tests/conftest.py
import pytest
from unittest.mock import MagicMock, AsyncMock

from fuzzyrank.models import Candidate

# --- Mocks des clients de bas niveau ---

@pytest.fixture
def mock_cache_manager():
    """Fixture pour un mock du gestionnaire de cache Redis."""
    cache = MagicMock()
    cache.get = AsyncMock(return_value=None)  # Par défaut, le cache est toujours vide (miss)
    cache.set = AsyncMock()
    cache.ping = AsyncMock(return_value=True)
    return cache

# --- Données ---

@pytest.fixture
def candidates():
    """Candidats de base : un préfixe exact, un match dispersé, un non-match."""
    return [
        Candidate(uid="1", title="xyz"),
        Candidate(uid="2", title="axybz"),
        Candidate(uid="3", title="abc"),
    ]

# --- Mocks des services de l'application ---

@pytest.fixture
def rank_service_mock(mock_cache_manager):
    """
    Fixture qui fournit une instance de RankService avec un cache mocké
    pour des tests unitaires isolés.
    """
    from fuzzyrank.search.rank_service import RankService

    return RankService(cache=mock_cache_manager, cache_enabled=True)
