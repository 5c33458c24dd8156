"""
Unit tests for application assembly.
"""

import pytest
import structlog
from fastapi.testclient import TestClient

from hybrid_dashboard.core.config import get_settings
from hybrid_dashboard.database.kv_store import InMemoryKeyValueStore
from hybrid_dashboard.main import create_app
from hybrid_dashboard.services.settings_hybrid import HybridSettingsService


@pytest.fixture
def app_env(monkeypatch):
    """Environment for an app with in-memory storage and both upstreams set."""
    monkeypatch.setenv("KV_BACKEND", "memory")
    monkeypatch.setenv("PRIMARY_API_URL", "https://primary.test/graphql")
    monkeypatch.setenv("ANALYTICS_API_URL", "https://analytics.test/graphql")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    structlog.reset_defaults()


class TestCreateApp:
    """Test create_app() and lifespan wiring"""

    def test_module_exposes_app(self):
        """uvicorn can serve hybrid_dashboard.main:app without --factory"""
        from fastapi import FastAPI

        from hybrid_dashboard import main

        assert isinstance(main.app, FastAPI)
        assert "/api/settings" in {route.path for route in main.app.routes}

    def test_routes_registered(self, app_env):
        app = create_app()

        paths = {route.path for route in app.routes}
        assert "/api/health" in paths
        assert "/api/settings" in paths
        assert "/api/settings/invalidate" in paths
        assert "/api/settings/cache/stats" in paths

    def test_lifespan_wires_service(self, app_env):
        app = create_app()

        with TestClient(app) as client:
            assert isinstance(app.state.kv_store, InMemoryKeyValueStore)
            assert isinstance(app.state.settings_service, HybridSettingsService)

            response = client.get("/api/health/live")
            assert response.status_code == 200
