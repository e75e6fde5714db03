import asyncio

import pytest
import requests
from PIL import Image

import avatar_loader
from avatar_loader import load_avatar, read_image_bytes
from tests.test_utils import png_bytes, png_data_uri


class FakeResponse:
    def __init__(self, content=b"", status=200):
        self.content = content
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


def test_loads_base64_data_uri():
    source = png_data_uri(Image.new("RGB", (8, 6), (0, 0, 255)))
    image = asyncio.run(load_avatar(source))
    assert image.mode == "RGBA"
    assert image.size == (8, 6)
    assert image.getpixel((0, 0)) == (0, 0, 255, 255)


def test_reads_percent_encoded_data_uri():
    assert read_image_bytes("data:text/plain,hello%20world") == b"hello world"


def test_loads_local_file(tmp_path):
    path = tmp_path / "avatar.png"
    Image.new("RGBA", (12, 12), (1, 2, 3, 255)).save(path)
    image = asyncio.run(load_avatar(str(path)))
    assert image.getpixel((5, 5)) == (1, 2, 3, 255)


def test_fetches_http_with_timeout(monkeypatch):
    calls = []

    def fake_get(url, timeout=None, headers=None):
        calls.append((url, timeout, headers))
        return FakeResponse(png_bytes(Image.new("RGBA", (4, 4), (9, 9, 9, 255))))

    monkeypatch.setattr(avatar_loader.requests, "get", fake_get)
    image = asyncio.run(load_avatar("https://cdn.example.com/a.png", timeout=3))

    assert image.size == (4, 4)
    url, timeout, headers = calls[0]
    assert url == "https://cdn.example.com/a.png"
    assert timeout == 3
    assert "User-Agent" in headers


def test_http_errors_propagate(monkeypatch):
    monkeypatch.setattr(avatar_loader.requests, "get", lambda url, **kwargs: FakeResponse(status=404))
    with pytest.raises(requests.HTTPError):
        asyncio.run(load_avatar("https://cdn.example.com/missing.png"))


def test_undecodable_data_raises():
    with pytest.raises(OSError):
        asyncio.run(load_avatar("data:image/png;base64,bm90IGFuIGltYWdl"))


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        asyncio.run(load_avatar(str(tmp_path / "nope.png")))
