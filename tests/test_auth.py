from __future__ import annotations

from starlette.testclient import TestClient

from mcp_joplin_notebooks.asgi import create_app


def test_requires_api_key(monkeypatch) -> None:
    monkeypatch.setenv("JOPLIN_TOKEN", "t")
    monkeypatch.setenv("MCP_API_KEY", "k")
    # Nothing listens here, so the health check reports Joplin as down.
    monkeypatch.setenv("JOPLIN_BASE_URL", "http://127.0.0.1:9")
    app = create_app()
    with TestClient(app) as client:
        # Health checks are intentionally unauthenticated.
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json() == {"ok": True, "joplin": False}

        # MCP endpoint is protected by X-API-Key.
        r2 = client.get("/mcp")
        assert r2.status_code == 401

        r3 = client.get("/mcp", headers={"x-api-key": "k"})
        assert r3.status_code != 401
