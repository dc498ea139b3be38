"""Tests for the image upload endpoints."""

import base64

import pytest

GIF_BYTES = b"GIF89a\x01\x00\x01\x00\x80\x00\x00\xff\xff\xff\x00\x00\x00!\xf9\x04\x01\x00\x00\x00\x00,\x00\x00\x00\x00\x01\x00\x01\x00\x00\x02\x02D\x01\x00;"


def _payload(name="pixel.gif", mime="image/gif", content=GIF_BYTES):
    return {"name": name, "type": mime, "data": base64.b64encode(content).decode()}


@pytest.mark.asyncio
async def test_upload_and_serve(client, tmp_path):
    response = await client.post("/api/v1/uploads/images", json=_payload())

    assert response.status_code == 201
    body = response.json()
    assert body["url"] == f"http://test/api/v1/uploads/files/{body['path']}"
    assert body["size"] == len(GIF_BYTES)
    assert body["mime_type"] == "image/gif"

    served = await client.get(f"/api/v1/uploads/files/{body['path']}")
    assert served.status_code == 200
    assert served.content == GIF_BYTES
    assert served.headers["content-type"] == "image/gif"


@pytest.mark.asyncio
async def test_upload_data_url(client):
    payload = _payload()
    payload["data"] = f"data:image/gif;base64,{payload['data']}"

    response = await client.post("/api/v1/uploads/images", json=payload)
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_upload_rejected(client):
    response = await client.post(
        "/api/v1/uploads/images", json=_payload(name="pixel.webp", mime="image/webp")
    )

    assert response.status_code == 400
    assert response.json() == {
        "error": "File type 'image/webp' is not allowed. "
        "Allowed types: image/jpeg, image/png, image/gif"
    }


@pytest.mark.asyncio
async def test_upload_too_large(client):
    response = await client.post(
        "/api/v1/uploads/images", json=_payload(content=b"\x00" * (500 * 1024 + 1))
    )

    assert response.status_code == 400
    assert "exceeds maximum allowed size (500KB)" in response.json()["error"]


@pytest.mark.asyncio
async def test_serve_missing_file(client):
    response = await client.get("/api/v1/uploads/files/2026/10/missing.gif")

    assert response.status_code == 404
    assert response.json() == {"detail": "File not found"}


@pytest.mark.asyncio
async def test_serve_path_traversal(client):
    response = await client.get("/api/v1/uploads/files/..%2F..%2Fetc%2Fpasswd")
    assert response.status_code in (400, 404)
