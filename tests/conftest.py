"""Pytest configuration and fixtures."""
import textwrap

import pytest

from config import load


@pytest.fixture(autouse=True)
def no_config_env(monkeypatch):
    """Keep a developer's MAILADMIN_CONFIG out of the tests."""
    monkeypatch.delenv('MAILADMIN_CONFIG', raising=False)


@pytest.fixture
def make_config():
    """Load a configuration with the gate open plus the given overrides."""
    def _make(**overrides):
        return load({'configured': True, **overrides})
    return _make


@pytest.fixture
def write_config(tmp_path):
    def _write(content, name='config.yaml'):
        path = tmp_path / name
        path.write_text(textwrap.dedent(content), encoding='utf-8')
        return path
    return _write
