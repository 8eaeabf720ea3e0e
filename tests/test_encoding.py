"""Body encoding: JSON vs multipart switch."""

from __future__ import annotations

import io
import json
from dataclasses import dataclass
from datetime import datetime, timezone

import pytest
from pydantic import BaseModel, Field

from pocketkit import FileUpload, InvalidConfig
from pocketkit.adapters.encoding import encode_body, is_binary


class Article(BaseModel):
    title: str
    author_id: str = Field(alias="authorId")


@dataclass
class Tagged:
    name: str
    tags: list[str]


def test_scalar_body_is_json():
    encoded = encode_body({"title": "x", "views": 1, "meta": {"a": [1, 2]}, "when": datetime(2024, 1, 2, tzinfo=timezone.utc)})

    assert encoded.files is None
    assert encoded.json == {"title": "x", "views": 1, "meta": {"a": [1, 2]}, "when": "2024-01-02T00:00:00Z"}


def test_pydantic_body_uses_aliases():
    encoded = encode_body(Article(title="t", authorId="u1"))

    assert encoded.json == {"title": "t", "authorId": "u1"}


def test_dataclass_body():
    assert encode_body(Tagged("n", ["a"])).json == {"name": "n", "tags": ["a"]}


@pytest.mark.parametrize(
    "value",
    [b"raw", bytearray(b"raw"), io.BytesIO(b"raw"), FileUpload("a.txt", b"raw"), [b"one", b"two"]],
)
def test_binary_values_switch_to_multipart(value):
    encoded = encode_body({"title": "x", "attachment": value})

    assert encoded.json is None
    assert encoded.files
    assert all(name == "attachment" for name, _ in encoded.files)
    assert encoded.data == {"title": "x"}
    assert is_binary(value)


def test_multipart_form_values():
    encoded = encode_body(
        {
            "file": FileUpload("a.png", b"\x89PNG", "image/png"),
            "flag": True,
            "count": 3,
            "tags": ["a", "b"],
            "meta": {"k": "v"},
            "skipped": None,
        }
    )

    assert encoded.files == (("file", ("a.png", b"\x89PNG", "image/png")),)
    assert encoded.data == {"flag": "true", "count": "3", "tags": ["a", "b"], "meta": json.dumps({"k": "v"})}


def test_mixed_binary_list_is_rejected():
    with pytest.raises(InvalidConfig):
        encode_body({"files": [b"one", "two"]})


def test_unsupported_body_type():
    with pytest.raises(InvalidConfig):
        encode_body(["not", "a", "mapping"])


@pytest.mark.parametrize(
    "value",
    [io.StringIO("hello"), [io.StringIO("a")], FileUpload("a.txt", io.StringIO("hello"))],
)
def test_text_streams_are_rejected(value):
    with pytest.raises(InvalidConfig):
        encode_body({"doc": value})


def test_binary_file_on_disk_is_multipart(tmp_path):
    path = tmp_path / "report.pdf"
    path.write_bytes(b"%PDF-1.4")

    with path.open("rb") as fh:
        encoded = encode_body({"doc": fh})

        assert encoded.files == (("doc", ("report.pdf", fh, None)),)
