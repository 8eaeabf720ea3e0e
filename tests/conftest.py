"""Shared pytest fixtures for pocketkit tests."""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from pocketkit import ClientSettings, PocketBase

BASE_URL = "https://example.pocketbase.io"

Handler = Callable[[httpx.Request], httpx.Response]


class RecordingTransport:
    """Fake server: records every request and answers with `handler`."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.handler: Handler = lambda request: httpx.Response(200, json={})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def last(self) -> httpx.Request:
        assert self.requests, "no request was sent"
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


@pytest.fixture
def server() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def settings() -> ClientSettings:
    return ClientSettings(_env_file=None, base_url=BASE_URL, lang="en", max_per_page=500)


@pytest.fixture
def pb(server: RecordingTransport, settings: ClientSettings) -> PocketBase:
    return PocketBase(BASE_URL, "en", settings=settings, transport=httpx.MockTransport(server))


def list_payload(items: list[dict[str, Any]], *, page: int = 1, per_page: int = 30, total_items: int | None = None) -> dict[str, Any]:
    return {
        "page": page,
        "perPage": per_page,
        "totalItems": len(items) if total_items is None else total_items,
        "items": items,
    }


def admin_auth_payload(token: str = "T1") -> dict[str, Any]:
    return {
        "token": token,
        "admin": {
            "id": "a1",
            "created": "2022-06-25 11:03:45.876Z",
            "updated": "2022-06-25 11:03:45.876Z",
            "avatar": 0,
            "email": "a@b.com",
        },
    }
