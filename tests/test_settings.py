"""Server settings service: admin-only reads, partial updates and test endpoints."""

from __future__ import annotations

from typing import Any

import httpx
import pytest
from pydantic import BaseModel, ConfigDict

from conftest import BASE_URL
from pocketkit import AppleClientSecret, Credential, CredentialKind, InvalidConfig, Unauthenticated

SETTINGS = {
    "meta": {"appName": "Acme", "appUrl": "https://acme.test", "senderAddress": "no-reply@acme.test"},
    "logs": {"maxDays": 7},
    "s3": {"enabled": False, "bucket": ""},
}


class Meta(BaseModel):
    model_config = ConfigDict(extra="allow")

    appName: str


class AppSettings(BaseModel):
    model_config = ConfigDict(extra="allow")

    meta: Meta


@pytest.fixture
def admin_pb(pb):
    pb.context.set_credential(Credential(token="adm", kind=CredentialKind.ADMIN))
    return pb


@pytest.mark.asyncio
async def test_settings_require_auth(pb, server):
    service = pb.server_settings()

    with pytest.raises(Unauthenticated):
        await service.get_all()
    with pytest.raises(Unauthenticated):
        await service.update({"logs": {"maxDays": 3}})
    with pytest.raises(Unauthenticated):
        await service.test_email("a@b.com", "verification")
    assert server.requests == []


@pytest.mark.asyncio
async def test_get_all_defaults_to_plain_dict(admin_pb, server):
    server.handler = lambda request: httpx.Response(200, json=SETTINGS)

    settings = await admin_pb.server_settings().get_all(query_params={"fields": "meta"})

    assert str(server.last.url) == f"{BASE_URL}/api/settings?fields=meta"
    assert server.last.headers["Authorization"] == "Bearer adm"
    assert settings == SETTINGS


@pytest.mark.asyncio
async def test_update_is_partial_patch_with_custom_model(admin_pb, server):
    server.handler = lambda request: httpx.Response(200, json={**SETTINGS, "meta": {**SETTINGS["meta"], "appName": "New"}})

    settings = await admin_pb.server_settings(model=AppSettings).update({"meta": {"appName": "New"}})

    assert server.last.method == "PATCH"
    assert server.last.url.path == "/api/settings"
    assert server.last_json() == {"meta": {"appName": "New"}}
    assert isinstance(settings, AppSettings)
    assert settings.meta.appName == "New"


@pytest.mark.asyncio
async def test_update_rejects_file_uploads(admin_pb, server):
    with pytest.raises(InvalidConfig):
        await admin_pb.server_settings().update({"logo": b"\x89PNG"})
    assert server.requests == []


@pytest.mark.asyncio
async def test_test_s3_and_test_email_are_content_less(admin_pb, server):
    server.handler = lambda request: httpx.Response(204)
    service = admin_pb.server_settings()

    assert await service.test_s3("backups") is None
    assert server.last.url.path == "/api/settings/test/s3"
    assert server.last_json() == {"filesystem": "backups"}

    assert await service.test_email("test@example.com", "test") is None
    assert server.last.url.path == "/api/settings/test/email"
    assert server.last_json() == {"email": "test@example.com", "template": "test"}


@pytest.mark.asyncio
async def test_test_email_validates_before_network(admin_pb, server):
    service = admin_pb.server_settings()

    with pytest.raises(InvalidConfig):
        await service.test_email("", "test")
    with pytest.raises(InvalidConfig):
        await service.test_email("a@b.com", "test", extra={"email": "other@b.com"})
    assert server.requests == []


@pytest.mark.asyncio
async def test_generate_apple_client_secret(admin_pb, server):
    server.handler = lambda request: httpx.Response(200, json={"secret": "test"})

    result = await admin_pb.server_settings().generate_apple_client_secret("test", "test", "test", "test", 3600)

    assert server.last.url.path == "/api/settings/apple/generate-client-secret"
    assert server.last_json() == {
        "clientId": "test",
        "teamId": "test",
        "keyId": "test",
        "privateKey": "test",
        "duration": 3600,
    }
    assert result == AppleClientSecret(secret="test")


@pytest.mark.parametrize("duration", [0, -10])
@pytest.mark.asyncio
async def test_apple_secret_needs_positive_duration(admin_pb, server, duration):
    args: dict[str, Any] = {"client_id": "c", "team_id": "t", "key_id": "k", "private_key": "p"}

    with pytest.raises(InvalidConfig):
        await admin_pb.server_settings().generate_apple_client_secret(duration=duration, **args)
    assert server.requests == []
