"""
Vibe Slides API client - Authenticated JSON requests over aiohttp.

Endpoints:
    POST /v1/decks                               create a deck from a prompt
    GET  /v1/decks/{id}                          deck status
    POST /v1/decks/{id}/export                   start an export
    GET  /v1/decks/{id}/export?export_id={id}    export status
"""

import asyncio
import json
import logging
from typing import Any, Optional
from urllib.parse import quote

import aiohttp
from pydantic import BaseModel, ValidationError

from ..core.config import Settings
from ..core.exceptions import RemoteError, TransientPollError
from ..models.deck import ApiResponse, Deck, ExportJob

logger = logging.getLogger(__name__)


def _parse(model: type[BaseModel], res: ApiResponse, error_cls: type[Exception], what: str):
    """Validate a response body, mapping malformed payloads onto ``error_cls``."""
    if not isinstance(res.data, dict):
        raise error_cls(f"Unexpected {what} response: {str(res.data)[:200]}", status=res.status)
    try:
        return model.model_validate(res.data)
    except ValidationError as e:
        raise error_cls(f"Invalid {what} response: {e}", status=res.status) from e


class VibeSlidesClient:
    """Thin async client for the Vibe Slides REST API.

    No automatic retries: callers decide what to do with a non-200 response.
    """

    def __init__(self, settings: Settings, http_session: Optional[aiohttp.ClientSession] = None):
        self._settings = settings
        self._api_key = settings.require_api_key()
        self._base_url = settings.api_url
        self._http_session = http_session
        self._owns_session = http_session is None

    async def __aenter__(self) -> "VibeSlidesClient":
        if self._http_session is None:
            timeout = aiohttp.ClientTimeout(total=self._settings.request_timeout)
            self._http_session = aiohttp.ClientSession(timeout=timeout)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    @property
    def http_session(self) -> aiohttp.ClientSession:
        if self._http_session is None:
            raise RuntimeError("Client is not open; use 'async with VibeSlidesClient(...)'")
        return self._http_session

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    async def request(self, method: str, path: str, body: Optional[dict] = None) -> ApiResponse:
        """
        Send a request and return status, headers and the decoded body.

        The body is parsed as JSON; if that fails the raw text is returned
        so plain-text error pages can still be inspected.
        """
        url = f"{self._base_url}{path}"
        payload = json.dumps(body) if body is not None else None

        logger.debug(f"{method} {url}")
        try:
            async with self.http_session.request(
                method,
                url,
                data=payload,
                headers=self.headers,
                timeout=aiohttp.ClientTimeout(total=self._settings.request_timeout),
            ) as resp:
                text = await resp.text()
                try:
                    data: Any = json.loads(text)
                except ValueError:
                    data = text
                return ApiResponse(
                    status=resp.status,
                    headers={k.lower(): v for k, v in resp.headers.items()},
                    data=data,
                )
        except asyncio.TimeoutError as e:
            raise RemoteError(f"{method} {path} timed out") from e
        except aiohttp.ClientError as e:
            raise RemoteError(f"{method} {path} failed: {e}") from e

    # -- API operations ------------------------------------------------------

    async def create_deck(self, prompt: str, name: Optional[str] = None) -> Deck:
        payload = {"prompt": prompt}
        if name:
            payload["name"] = name

        res = await self.request("POST", "/v1/decks", payload)
        if not res.ok:
            raise RemoteError(
                f"Error creating deck: {res.status} - {json.dumps(res.data)}",
                status=res.status,
            )
        return _parse(Deck, res, RemoteError, "deck")

    async def get_deck(self, deck_id: str) -> tuple[Deck, ApiResponse]:
        """Fetch deck status. Returns the raw response too, for ``retry-after``."""
        res = await self.request("GET", f"/v1/decks/{deck_id}")
        if not res.ok:
            raise TransientPollError(f"Error polling deck: {res.status}", status=res.status)
        return _parse(Deck, res, TransientPollError, "deck"), res

    async def start_export(self, deck_id: str, fmt: str, upscale: bool = False) -> ExportJob:
        res = await self.request(
            "POST",
            f"/v1/decks/{deck_id}/export",
            {"format": fmt, "upscale": bool(upscale)},
        )
        if not res.ok:
            raise RemoteError(
                f"Error starting export: {res.status} - {json.dumps(res.data)}",
                status=res.status,
            )
        return _parse(ExportJob, res, RemoteError, "export")

    async def get_export(self, deck_id: str, export_id: str) -> ExportJob:
        res = await self.request("GET", f"/v1/decks/{deck_id}/export?export_id={quote(export_id, safe='')}")
        if not res.ok:
            raise TransientPollError(f"Export poll error: {res.status}", status=res.status)
        return _parse(ExportJob, res, TransientPollError, "export")
