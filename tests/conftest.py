"""
Shared test fixtures for the termsearch test suite.

Provides temporary catalog and settings files that use real file I/O
(no mocking of the filesystem).
"""

import pytest
import toml
import tomli_w

from termsearch.search.engine import Engine
from termsearch.services.catalog import Catalog


@pytest.fixture
def ddg():
    return Engine(
        id="2b7b1c46-3d6e-4c55-a0d1-6e8f5b0f0a01",
        name="ddg",
        url_pattern="https://duckduckgo.com/?q={q}",
        pattern="{q}",
        regex=r"\s+",
        replacement="+",
    )


@pytest.fixture
def wiki():
    return Engine(
        id="9e4e0a53-1c1b-4b8c-8e55-0f3e0c7d2b02",
        name="wiki",
        url_pattern="https://en.wikipedia.org/wiki/%s",
        pattern="%s",
        regex=" ",
        replacement="_",
    )


@pytest.fixture
def catalog(ddg, wiki):
    """In-memory catalog with two engines and ddg as default."""
    return Catalog(engines=[ddg, wiki], default_engine="ddg")


@pytest.fixture
def tmp_catalog(tmp_path, ddg, wiki):
    """Create a real catalog TOML file with test engines."""
    catalog_path = tmp_path / "search_config.toml"
    data = {
        "default_engine": "ddg",
        "engines": [ddg.to_dict(), wiki.to_dict()],
    }
    catalog_path.write_text(tomli_w.dumps(data))
    return catalog_path


@pytest.fixture
def tmp_settings(tmp_path):
    """Create a real settings TOML file pointing into tmp_path."""
    settings_path = tmp_path / "settings.toml"
    data = {
        "catalog": {"path": str(tmp_path / "search_config.toml")},
        "logging": {"path": str(tmp_path / "search.log"), "level": "DEBUG"},
        "browser": {"command": "xdg-open"},
    }
    settings_path.write_text(toml.dumps(data))
    return settings_path
