"""
Uploads API — status codes and payloads of the CID endpoint.

The pipeline is replaced per test; ASGITransport does not run the lifespan,
so no w3up client is built.
"""
import httpx
import pytest
from httpx import ASGITransport

import ipfs_cid.uploads as uploads
from ipfs_cid.app import app
from ipfs_cid.errors import ConfigError, InputError, NetworkError, UploadError
from ipfs_cid.schemas import IpfsCidResponse

pytestmark = pytest.mark.anyio("asyncio")

IMAGE_URL = "https://picsum.photos/seed/test/200"


def _client() -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.mark.anyio
async def test_create_cid_returns_camel_case_payload(monkeypatch):
    seen = []

    async def fake_pipeline(image_url):
        seen.append(image_url)
        return IpfsCidResponse(cid="bafkreiexample", media_type="image/jpeg")

    monkeypatch.setattr(uploads, "create_ipfs_cid_from_image_url", fake_pipeline)

    async with _client() as c:
        r = await c.post("/uploads/ipfs", json={"image_url": IMAGE_URL})

    assert r.status_code == 200
    assert r.json() == {"cid": "bafkreiexample", "mediaType": "image/jpeg"}
    assert seen == [IMAGE_URL]


@pytest.mark.anyio
@pytest.mark.parametrize(
    "error, status, kind",
    [
        (InputError("Image URL must be provided."), 400, "input"),
        (ConfigError("W3_DELEGATED_KEY is not set", field="W3_DELEGATED_KEY"), 503, "config"),
        (NetworkError(f"Failed to fetch image from {IMAGE_URL}: 404 Not Found", url=IMAGE_URL, status_code=404), 502, "network"),
        (UploadError("CID returned was null or undefined.", url=IMAGE_URL), 502, "upload"),
    ],
)
async def test_pipeline_errors_map_to_status(monkeypatch, error, status, kind):
    async def failing_pipeline(image_url):
        raise error

    monkeypatch.setattr(uploads, "create_ipfs_cid_from_image_url", failing_pipeline)

    async with _client() as c:
        r = await c.post("/uploads/ipfs", json={"image_url": IMAGE_URL})

    assert r.status_code == status
    assert r.json()["detail"] == {"kind": kind, "message": error.message}


@pytest.mark.anyio
async def test_missing_body_field_is_rejected():
    async with _client() as c:
        r = await c.post("/uploads/ipfs", json={})
    assert r.status_code == 422


@pytest.mark.anyio
async def test_remote_patterns_endpoint():
    async with _client() as c:
        r = await c.get("/uploads/remote-patterns")

    assert r.status_code == 200
    assert r.json() == [
        {"protocol": "https", "hostname": "*.ipfs.w3s.link", "pathname": "/*"},
        {"protocol": "https", "hostname": "picsum.photos", "pathname": "/seed/**"},
    ]


@pytest.mark.anyio
@pytest.mark.parametrize(
    "url, allowed",
    [
        (IMAGE_URL, True),
        ("https://bafy.ipfs.w3s.link/cat.png", True),
        ("https://evil.example/x", False),
        ("http://picsum.photos/seed/test/200", False),
    ],
)
async def test_remote_image_check(url, allowed):
    async with _client() as c:
        r = await c.get("/uploads/remote-patterns/check", params={"url": url})

    assert r.status_code == 200
    assert r.json() == {"url": url, "allowed": allowed}


@pytest.mark.anyio
async def test_remote_image_check_requires_url():
    async with _client() as c:
        r = await c.get("/uploads/remote-patterns/check")

    assert r.status_code == 422


@pytest.mark.anyio
async def test_root_reports_status():
    async with _client() as c:
        r = await c.get("/")

    assert r.status_code == 200
    assert r.json()["status"] == "ok"
    assert "w3up_client_ready" in r.json()
