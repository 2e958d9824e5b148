"""
Storage gateway endpoint and upload client.
"""
import re

import httpx
import pytest

from app.core.exceptions import UploadFailure
from app.services.storage import StorageService
from app.services.upload_client import UploadClient, build_key, file_extension

from conftest import BUCKET, FAILING_BODY

KEY_PATTERN = re.compile(r"^products/[0-9a-f-]{36}\.jpg$")


@pytest.mark.parametrize(
    "filename, expected",
    [
        ("photo.jpg", "jpg"),
        ("archive.tar.gz", "gz"),
        ("README", ""),
        ("", ""),
        (None, ""),
    ],
)
def test_file_extension(filename, expected):
    assert file_extension(filename) == expected


def test_build_key_shape_and_uniqueness():
    keys = {build_key("photo.jpg") for _ in range(50)}
    assert len(keys) == 50
    assert all(KEY_PATTERN.match(key) for key in keys)


def test_build_key_without_extension_has_no_dot():
    key = build_key("README", prefix="categories")
    assert key.startswith("categories/")
    assert "." not in key


async def test_gateway_stores_file(client, s3_client):
    response = await client.post(
        "/api/v1/upload-s3",
        files={"file": ("a.png", b"image-bytes", "image/png")},
        data={"path": "products/abc.png"},
    )

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "url": f"https://{BUCKET}.s3.amazonaws.com/products/abc.png",
    }
    assert s3_client.objects["products/abc.png"] == {
        "body": b"image-bytes",
        "content_type": "image/png",
    }


async def test_gateway_rejects_missing_file(client):
    response = await client.post("/api/v1/upload-s3", data={"path": "products/abc.png"})
    assert response.status_code == 400
    assert response.json() == {"error": "No file provided"}


async def test_gateway_rejects_missing_path(client):
    response = await client.post(
        "/api/v1/upload-s3",
        files={"file": ("a.png", b"image-bytes", "image/png")},
    )
    assert response.status_code == 400
    assert response.json() == {"error": "No path provided"}


async def test_gateway_reports_storage_failure(client, s3_client):
    response = await client.post(
        "/api/v1/upload-s3",
        files={"file": ("a.png", FAILING_BODY, "image/png")},
        data={"path": "products/abc.png"},
    )
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to upload file"}
    assert s3_client.objects == {}


async def test_gateway_without_bucket_fails(app, client, s3_client):
    app.state.storage_service = StorageService(
        bucket_name=None, region="us-east-1", s3_client=s3_client
    )
    response = await client.post(
        "/api/v1/upload-s3",
        files={"file": ("a.png", b"image-bytes", "image/png")},
        data={"path": "products/abc.png"},
    )
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to upload file"}


async def test_upload_client_round_trip(app, s3_client):
    url = await app.state.upload_client.upload_bytes(b"jpeg-bytes", "shot.jpg", "image/jpeg")

    prefix = f"https://{BUCKET}.s3.amazonaws.com/"
    assert url.startswith(prefix)
    key = url[len(prefix):]
    assert KEY_PATTERN.match(key)
    assert s3_client.objects[key]["body"] == b"jpeg-bytes"


async def test_upload_client_returns_gateway_url_unmodified():
    def handler(request):
        return httpx.Response(200, json={"success": True, "url": "https://cdn.example/x?y=1"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        client = UploadClient(http_client, "http://gateway/upload")
        assert await client.upload_bytes(b"data", "x.jpg") == "https://cdn.example/x?y=1"


async def test_upload_client_sends_file_and_path():
    seen = {}

    def handler(request):
        seen["body"] = request.read()
        return httpx.Response(200, json={"success": True, "url": "https://cdn.example/x"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        client = UploadClient(http_client, "http://gateway/upload", key_prefix="categories")
        await client.upload_bytes(b"payload", "hero.webp", "image/webp")

    assert b'name="file"; filename="hero.webp"' in seen["body"]
    assert b'name="path"' in seen["body"]
    assert b"categories/" in seen["body"]
    assert b"payload" in seen["body"]


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, json={"error": "Failed to upload file"}),
        httpx.Response(400, json={"error": "No file provided"}),
        httpx.Response(200, text="not json"),
        httpx.Response(200, json={"success": True}),
    ],
)
async def test_upload_client_failures(response):
    async with httpx.AsyncClient(transport=httpx.MockTransport(lambda request: response)) as http_client:
        client = UploadClient(http_client, "http://gateway/upload")
        with pytest.raises(UploadFailure):
            await client.upload_bytes(b"data", "x.jpg")


async def test_upload_client_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        client = UploadClient(http_client, "http://gateway/upload")
        with pytest.raises(UploadFailure):
            await client.upload_bytes(b"data", "x.jpg")


async def test_same_file_uploaded_twice_gets_two_objects(app, s3_client):
    first = await app.state.upload_client.upload_bytes(b"same-bytes", "shot.jpg", "image/jpeg")
    second = await app.state.upload_client.upload_bytes(b"same-bytes", "shot.jpg", "image/jpeg")

    assert first != second
    assert len(s3_client.objects) == 2
    assert all(entry["body"] == b"same-bytes" for entry in s3_client.objects.values())
