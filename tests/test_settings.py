from __future__ import annotations

import pytest
from pydantic import ValidationError

from mcp_joplin_notebooks.settings import Settings


def test_settings_load_from_env(monkeypatch) -> None:
    monkeypatch.setenv("JOPLIN_TOKEN", "t")
    monkeypatch.setenv("MCP_API_KEY", "k")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    s = Settings()
    assert s.joplin_token == "t"
    assert s.mcp_api_key == "k"
    assert s.page_size == 100
    assert s.log_level == "DEBUG"


def test_stdio_transport_needs_no_api_key(monkeypatch) -> None:
    monkeypatch.setenv("JOPLIN_TOKEN", "t")
    monkeypatch.setenv("MCP_TRANSPORT", "stdio")
    monkeypatch.delenv("MCP_API_KEY", raising=False)
    assert Settings().mcp_transport == "stdio"


def test_http_transport_requires_api_key(monkeypatch) -> None:
    monkeypatch.setenv("JOPLIN_TOKEN", "t")
    monkeypatch.delenv("MCP_API_KEY", raising=False)
    monkeypatch.delenv("MCP_TRANSPORT", raising=False)
    with pytest.raises(ValidationError):
        Settings()


def test_page_size_is_bounded(monkeypatch) -> None:
    monkeypatch.setenv("JOPLIN_TOKEN", "t")
    monkeypatch.setenv("MCP_API_KEY", "k")
    monkeypatch.setenv("PAGE_SIZE", "500")
    with pytest.raises(ValidationError):
        Settings()
