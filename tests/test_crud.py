"""CRUD service: query building, body encoding and error mapping."""

from __future__ import annotations

import io
import json
from dataclasses import dataclass
from typing import Any

import httpx
import pytest
from pydantic import BaseModel

from conftest import BASE_URL, list_payload
from pocketkit import (
    ApiFailure,
    CreateConfig,
    Credential,
    CredentialKind,
    FileUpload,
    GetListConfig,
    GetOneConfig,
    InvalidConfig,
    Record,
    SerializationFailure,
    SortField,
    Unauthenticated,
    UpdateConfig,
)
from pocketkit.core.domain.models import Collection, LogRequest

POST = {
    "id": "d08dfc4f4d84419",
    "collectionId": "a98f514eb05f454",
    "collectionName": "posts",
    "created": "2022-06-25 11:03:45.876",
    "updated": "2022-06-25 11:03:45.876",
    "title": "test2",
}


class Post(BaseModel):
    title: str
    views: int = 0
    tags: list[str] = []


@dataclass
class Note:
    text: str
    pinned: bool = False


@pytest.mark.asyncio
async def test_get_list_default_config_builds_expected_url(pb, server):
    server.handler = lambda request: httpx.Response(200, json=list_payload([]))

    await pb.record("users").get_list()

    assert server.last.method == "GET"
    assert str(server.last.url) == f"{BASE_URL}/api/collections/users/records?page=1&perPage=30"
    assert server.last.headers["Accept-Language"] == "en"
    assert server.last.headers["Accept"] == "application/json"
    assert "Authorization" not in server.last.headers


@pytest.mark.asyncio
async def test_get_list_query_params_in_order(pb, server):
    server.handler = lambda request: httpx.Response(200, json=list_payload([]))
    config = GetListConfig(
        page=2,
        per_page=10,
        sort=[SortField("created", descending=True), "title"],
        filter="status = 'published' && views > 10",
        expand=["author", "comments"],
        query_params=[("tag", "a"), ("tag", "b")],
    )

    await pb.record("posts").get_list(config)

    assert list(server.last.url.params.multi_items()) == [
        ("page", "2"),
        ("perPage", "10"),
        ("sort", "-created,title"),
        ("filter", "status = 'published' && views > 10"),
        ("expand", "author,comments"),
        ("tag", "a"),
        ("tag", "b"),
    ]


@pytest.mark.asyncio
async def test_get_list_parses_records_and_expand(pb, server):
    item = {**POST, "expand": {"user": {**POST, "id": "u1", "collectionName": "users"}, "tags": [POST]}}
    server.handler = lambda request: httpx.Response(200, json=list_payload([item], per_page=10, total_items=21))

    result = await pb.record("posts").get_list(GetListConfig(per_page=10))

    assert result.total_items == 21
    assert result.total_pages == 3
    assert result.items[0].id == "d08dfc4f4d84419"
    assert result.items[0]["title"] == "test2"
    assert result.items[0].expand["user"].id == "u1"
    assert isinstance(result.items[0].expand["tags"], list)


@pytest.mark.parametrize("per_page", [0, -1, 501])
@pytest.mark.asyncio
async def test_get_list_rejects_bad_per_page_before_network(pb, server, per_page):
    with pytest.raises(InvalidConfig):
        await pb.record("posts").get_list(GetListConfig(per_page=per_page))

    assert server.requests == []


@pytest.mark.asyncio
async def test_get_list_400_maps_to_api_failure(pb, server):
    server.handler = lambda request: httpx.Response(400, json={"code": 400, "message": "bad filter", "data": {}})

    with pytest.raises(ApiFailure) as excinfo:
        await pb.record("posts").get_list(GetListConfig(filter="(("))

    assert excinfo.value.code == 400
    assert excinfo.value.message == "bad filter"
    assert excinfo.value.data == {}


@pytest.mark.asyncio
async def test_get_one_404_keeps_status_code(pb, server):
    server.handler = lambda request: httpx.Response(
        404, json={"code": 404, "message": "The requested resource wasn't found.", "data": {}}
    )

    with pytest.raises(ApiFailure) as excinfo:
        await pb.record("posts").get_one("missing")

    assert excinfo.value.code == 404
    assert str(server.last.url) == f"{BASE_URL}/api/collections/posts/records/missing"


@pytest.mark.asyncio
async def test_get_one_with_expand_and_custom_model(pb, server):
    server.handler = lambda request: httpx.Response(200, json={"title": "hello", "views": 3})

    post = await pb.record("posts", model=Post).get_one("abc", GetOneConfig(expand=["author"]))

    assert post == Post(title="hello", views=3)
    assert server.last.url.params["expand"] == "author"


@pytest.mark.asyncio
async def test_get_one_escapes_identifier(pb, server):
    server.handler = lambda request: httpx.Response(200, json=POST)

    await pb.record("posts").get_one("a/b")

    assert server.last.url.raw_path == b"/api/collections/posts/records/a%2Fb"


@pytest.mark.asyncio
async def test_create_json_body_round_trip(pb, server):
    server.handler = lambda request: httpx.Response(200, content=request.content, headers={"Content-Type": "application/json"})
    body = Post(title="hello", views=2, tags=["x", "y"])

    created = await pb.record("posts", model=Post).create(CreateConfig(body=body))

    assert created == body
    assert server.last.method == "POST"
    assert server.last.headers["Content-Type"] == "application/json"
    assert server.last_json() == {"title": "hello", "views": 2, "tags": ["x", "y"]}


@pytest.mark.asyncio
async def test_create_dataclass_body(pb, server):
    server.handler = lambda request: httpx.Response(200, content=request.content)

    created = await pb.record("notes", model=Note).create(CreateConfig(body=Note(text="hi", pinned=True)))

    assert created == Note(text="hi", pinned=True)


@pytest.mark.asyncio
async def test_create_with_binary_field_is_multipart(pb, server):
    server.handler = lambda request: httpx.Response(200, json=POST)
    body = {
        "title": "with file",
        "meta": {"a": 1},
        "document": FileUpload("report.pdf", b"%PDF-1.4", "application/pdf"),
    }

    await pb.record("posts").create(CreateConfig(body=body))

    content_type = server.last.headers["Content-Type"]
    assert content_type.startswith("multipart/form-data")
    payload = server.last.content
    assert b'name="title"' in payload
    assert b"with file" in payload
    assert b'name="document"; filename="report.pdf"' in payload
    assert b"%PDF-1.4" in payload
    assert b'{"a": 1}' in payload


@pytest.mark.asyncio
async def test_update_uses_patch_and_json(pb, server):
    server.handler = lambda request: httpx.Response(200, json={**POST, "title": "changed"})

    record = await pb.record("posts").update("d08dfc4f4d84419", UpdateConfig(body={"title": "changed"}))

    assert server.last.method == "PATCH"
    assert server.last.url.path == "/api/collections/posts/records/d08dfc4f4d84419"
    assert server.last_json() == {"title": "changed"}
    assert isinstance(record, Record)
    assert record["title"] == "changed"


@pytest.mark.asyncio
async def test_update_with_bytes_is_multipart(pb, server):
    server.handler = lambda request: httpx.Response(200, json=POST)

    await pb.record("posts").update("x", UpdateConfig(body={"avatar": b"\x89PNG"}))

    assert server.last.headers["Content-Type"].startswith("multipart/form-data")


@pytest.mark.asyncio
async def test_delete_is_content_less(pb, server):
    server.handler = lambda request: httpx.Response(204)

    assert await pb.record("posts").delete("x") is None
    assert server.last.method == "DELETE"


@pytest.mark.asyncio
async def test_empty_id_is_invalid_config(pb, server):
    with pytest.raises(InvalidConfig):
        await pb.record("posts").delete("")
    assert server.requests == []


@pytest.mark.asyncio
async def test_invalid_json_response_is_serialization_failure(pb, server):
    server.handler = lambda request: httpx.Response(200, content=b"<html>oops</html>")

    with pytest.raises(SerializationFailure) as excinfo:
        await pb.record("posts").get_one("x")

    assert excinfo.value.raw == b"<html>oops</html>"


@pytest.mark.asyncio
async def test_shape_mismatch_reports_field_path(pb, server):
    server.handler = lambda request: httpx.Response(200, json={"views": "many"})

    with pytest.raises(SerializationFailure) as excinfo:
        await pb.record("posts", model=Post).get_one("x")

    assert excinfo.value.path in {"title", "views"}


@pytest.mark.asyncio
async def test_plain_dict_model(pb, server):
    server.handler = lambda request: httpx.Response(200, json=list_payload([{"a": 1}]))

    result = await pb.record("anything", model=dict[str, Any]).get_list()

    assert result.items == [{"a": 1}]


@pytest.mark.asyncio
async def test_collection_meta_requires_auth(pb, server):
    with pytest.raises(Unauthenticated):
        await pb.collection().get_list()
    assert server.requests == []


@pytest.mark.asyncio
async def test_import_collections(pb, server):
    pb.context.set_credential(Credential(token="adm", kind=CredentialKind.ADMIN))
    server.handler = lambda request: httpx.Response(204)

    await pb.collection().import_collections([Collection(name="posts")], delete_missing=True)

    assert server.last.method == "PUT"
    assert server.last.url.path == "/api/collections/import"
    body = json.loads(server.last.content)
    assert body["deleteMissing"] is True
    assert body["collections"][0]["name"] == "posts"
    assert body["collections"][0]["schema"] == []


@pytest.mark.asyncio
async def test_text_stream_upload_is_invalid_config(pb, server):
    with pytest.raises(InvalidConfig):
        await pb.record("posts").create(CreateConfig(body={"doc": io.StringIO("hello")}))
    assert server.requests == []


@pytest.mark.asyncio
async def test_request_logs_require_auth(pb, server):
    with pytest.raises(Unauthenticated):
        await pb.logs().get_list()
    assert server.requests == []


@pytest.mark.asyncio
async def test_request_logs_list(pb, server):
    pb.context.set_credential(Credential(token="adm", kind=CredentialKind.ADMIN))
    entry = {
        "id": "l1",
        "created": "2022-06-25 11:03:45.876Z",
        "url": "/api/health",
        "method": "GET",
        "status": 200,
        "remoteIp": "127.0.0.1",
        "userAgent": "curl/8.0",
        "meta": {"errorMessage": ""},
    }
    server.handler = lambda request: httpx.Response(200, json=list_payload([entry], per_page=10, total_items=1))

    result = await pb.logs().get_list(GetListConfig(per_page=10, filter="status >= 400"))

    assert server.last.url.path == "/api/logs/requests"
    assert server.last.url.params["filter"] == "status >= 400"
    assert server.last.headers["Authorization"] == "Bearer adm"
    log = result.items[0]
    assert isinstance(log, LogRequest)
    assert log.status == 200
    assert log.remote_ip == "127.0.0.1"
    assert log.user_agent == "curl/8.0"
