from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

import main
from scorecard_api import cache
from scorecard_api.panel import ScorecardPanel
from scorecard_api.store import MatchStore, create_mock_matches


@pytest.fixture
def store() -> MatchStore:
    return MatchStore(create_mock_matches())


@pytest.fixture
def panel(store) -> ScorecardPanel:
    return ScorecardPanel(store)


@pytest.fixture
def client(monkeypatch, store, panel):
    cache.clear()
    monkeypatch.setattr(main, "store", store)
    monkeypatch.setattr(main, "panel", panel)
    yield TestClient(main.app)
    cache.clear()
