"""Tests for resource building and media reference tags."""

import hashlib

import pytest

from enml_notes.core.resources import (
    build_resource,
    build_resources,
    build_resources_for_item,
    media_tag,
    parse_binary_property_names,
)
from enml_notes.data_models import BinaryPayload, WorkItem
from enml_notes.errors import InputError

HELLO_MD5 = "5d41402abc4b2a76b9719d911017c592"


def test_build_resource_hashes_data_with_md5():
    resource = build_resource("data", BinaryPayload(b"hello", "text/plain", "hello.txt"))
    assert resource.body_hash == hashlib.md5(b"hello").digest()
    assert resource.hash_hex == HELLO_MD5
    assert resource.size == 5
    assert resource.mime == "text/plain"
    assert resource.file_name == "hello.txt"


def test_build_resource_defaults():
    resource = build_resource("receipt", BinaryPayload(b"\x00\x01"))
    assert resource.mime == "application/octet-stream"
    assert resource.file_name == "receipt"


def test_media_tag_format():
    assert media_tag("image/png", HELLO_MD5) == f'<en-media type="image/png" hash="{HELLO_MD5}"/>'


def test_build_resources_keeps_order_and_alignment():
    result = build_resources(
        [
            ("first", BinaryPayload(b"hello", "text/plain")),
            ("second", BinaryPayload(b"world", "image/png")),
        ]
    )
    assert [resource.file_name for resource in result.resources] == ["first", "second"]
    assert result.media_tags[0] == media_tag("text/plain", HELLO_MD5)
    assert result.media_tags[1] == media_tag("image/png", hashlib.md5(b"world").hexdigest())


def test_empty_result_is_falsy():
    assert not build_resources([])


def test_build_resources_for_item_missing_property_raises():
    item = WorkItem(json={}, binary={"data": BinaryPayload(b"hello")})
    with pytest.raises(InputError) as excinfo:
        build_resources_for_item(item, ["data", "photo"])
    assert excinfo.value.property_name == "photo"
    assert "data" in str(excinfo.value)


def test_parse_binary_property_names():
    assert parse_binary_property_names(" data, photo ,,scan ") == ["data", "photo", "scan"]
    assert parse_binary_property_names("") == []
    assert parse_binary_property_names(None) == []
