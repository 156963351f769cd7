"""Shared fixtures for the test suite."""

import pytest
from fastapi.testclient import TestClient

from prompt_bulk.core.config import Settings
from prompt_bulk.db.models import Template, VariablePreset
from prompt_bulk.strategies.stores import InMemoryRecordStore


@pytest.fixture
def store():
    """An empty in-memory record store."""
    return InMemoryRecordStore()


@pytest.fixture
def make_template():
    """Build a template; ``variables`` stays None so it is extracted from content."""

    def _make(template_id: str, content: str, name: str | None = None, **kwargs) -> Template:
        return Template(id=template_id, name=name or template_id, content=content, **kwargs)

    return _make


@pytest.fixture
def make_preset():
    """Build a variable preset bound to a placeholder."""

    def _make(preset_id: str, placeholder: str, values: str, name: str | None = None) -> VariablePreset:
        return VariablePreset(
            id=preset_id,
            name=name or preset_id,
            placeholder=placeholder,
            values=values,
        )

    return _make


@pytest.fixture
def settings(tmp_path):
    """Settings using the in-memory store and a temporary log directory."""
    return Settings(store_backend="memory", log_dir=tmp_path / "logs")


@pytest.fixture
def app(settings):
    """A fresh application instance backed by the in-memory store."""
    from prompt_bulk.main import create_app

    return create_app(settings)


@pytest.fixture
def client(app):
    """HTTP test client for the application."""
    return TestClient(app)
