"""Async client for the Joplin Data API (Web Clipper)."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .errors import BackendUnavailable, JoplinApiError, NotFound, UnexpectedResponseShape
from .models import Kind

logger = logging.getLogger(__name__)

_NOT_FOUND_HINTS = {
    Kind.FOLDER: "Use list_notebooks to see available folders.",
    Kind.NOTE: "Use search_notes to find valid note IDs.",
}


def not_found(kind: Kind, item_id: str) -> NotFound:
    label = "Folder" if kind is Kind.FOLDER else "Note"
    return NotFound(
        f'{label} with ID "{item_id}" not found.',
        identifier=item_id,
        hint=_NOT_FOUND_HINTS[kind],
    )


class JoplinClient:
    """Thin wrapper around Joplin's REST API."""

    def __init__(
        self,
        *,
        base_url: str,
        token: str,
        timeout_seconds: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._token = token
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(timeout_seconds),
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def ping(self) -> bool:
        """True when the Web Clipper service answers ``/ping``."""
        try:
            resp = await self._client.get("/ping")
        except httpx.TransportError as exc:
            logger.debug("Joplin ping failed: %s", exc)
            return False
        return resp.status_code == 200 and resp.text.startswith("JoplinClipperServer")

    async def request_json(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        method = method.upper()
        url_path = path if path.startswith("/") else f"/{path}"
        q = dict(params or {})
        q.setdefault("token", self._token)

        try:
            resp = await self._client.request(method, url_path, params=q, json=json_body)
        except httpx.TimeoutException as exc:
            raise BackendUnavailable(
                f"Timed out waiting for Joplin at {self._base_url} ({method} {url_path}).",
                hint="Check that Joplin is running and responsive, then retry.",
            ) from exc
        except httpx.TransportError as exc:
            raise BackendUnavailable(
                f"Could not reach Joplin at {self._base_url}: {exc}",
                hint="Check that Joplin is running with the Web Clipper service enabled.",
            ) from exc

        if resp.status_code >= 400:
            raise JoplinApiError(
                status_code=resp.status_code,
                method=method,
                url=str(resp.request.url),
                response_text=(resp.text or "").strip(),
            )

        # DELETE answers with an empty body.
        if not resp.content:
            return {}
        try:
            data = resp.json()
        except ValueError as exc:
            raise UnexpectedResponseShape(
                f"Joplin returned a non-JSON response for {method} {url_path}."
            ) from exc
        if not isinstance(data, dict):
            raise UnexpectedResponseShape(
                f"Joplin returned unexpected JSON type {type(data).__name__} "
                f"for {method} {url_path}."
            )
        return data

    async def get_paged(
        self,
        path: str,
        *,
        page: int = 1,
        limit: int = 20,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        q = dict(params or {})
        q.update({"page": page, "limit": limit})
        return await self.request_json("GET", path, params=q)

    async def _request_item(
        self,
        method: str,
        kind: Kind,
        item_id: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        try:
            return await self.request_json(
                method, f"{kind.path}/{item_id}", params=params, json_body=json_body
            )
        except JoplinApiError as exc:
            if exc.status_code == 404:
                raise not_found(kind, item_id) from exc
            raise

    async def fetch_one(self, kind: Kind, item_id: str, fields: str) -> dict[str, Any]:
        return await self._request_item("GET", kind, item_id, params={"fields": fields})

    async def fetch_page(
        self,
        kind: Kind,
        *,
        fields: str,
        page: int = 1,
        limit: int = 100,
        parent_id: str | None = None,
        order_by: str | None = None,
        order_dir: str | None = None,
        query: str | None = None,
    ) -> dict[str, Any]:
        if parent_id and kind is not Kind.NOTE:
            raise ValueError("parent_id only filters notes; folders are listed whole.")
        params: dict[str, Any] = {"fields": fields}
        if order_by:
            params["order_by"] = order_by
        if order_dir:
            params["order_dir"] = order_dir

        if query is not None:
            path = "/search"
            params.update({"query": query, "type": kind.value})
        elif parent_id:
            path = f"{Kind.FOLDER.path}/{parent_id}/notes"
        else:
            path = kind.path

        logger.debug("GET %s page=%s limit=%s", path, page, limit)
        try:
            return await self.get_paged(path, page=page, limit=limit, params=params)
        except JoplinApiError as exc:
            if exc.status_code == 404 and parent_id:
                raise not_found(Kind.FOLDER, parent_id) from exc
            raise

    async def create(self, kind: Kind, body: dict[str, Any]) -> dict[str, Any]:
        return await self.request_json("POST", kind.path, json_body=body)

    async def update(self, kind: Kind, item_id: str, body: dict[str, Any]) -> dict[str, Any]:
        return await self._request_item("PUT", kind, item_id, json_body=body)

    async def delete(self, kind: Kind, item_id: str) -> None:
        await self._request_item("DELETE", kind, item_id)
