from io import BytesIO

import pytest
import requests
from PIL import Image

from plantlens.errors import ImageError, ServiceError
from plantlens.imaging import SAMPLE_IMAGES, fetch_sample_image, image_data_url, to_jpeg_bytes
from tests.helpers import FakeResponse, make_image_bytes


def test_png_is_reencoded_as_jpeg():
    jpeg = to_jpeg_bytes(make_image_bytes("PNG"))
    img = Image.open(BytesIO(jpeg))
    assert img.format == "JPEG"
    assert img.mode == "RGB"


def test_large_image_is_downscaled():
    jpeg = to_jpeg_bytes(make_image_bytes("PNG", size=(400, 200)), max_side=100)
    assert Image.open(BytesIO(jpeg)).size == (100, 50)


def test_rgba_image_is_flattened():
    buffer = BytesIO()
    Image.new("RGBA", (10, 10), (0, 128, 0, 128)).save(buffer, format="PNG")
    assert Image.open(BytesIO(to_jpeg_bytes(buffer.getvalue()))).mode == "RGB"


@pytest.mark.parametrize("data", [b"", b"definitely not an image"])
def test_unreadable_data_raises(data):
    with pytest.raises(ImageError):
        to_jpeg_bytes(data)


def test_data_url_uses_image_mime_type():
    assert image_data_url(make_image_bytes("PNG")).startswith("data:image/png;base64,")
    assert image_data_url(make_image_bytes("JPEG")).startswith("data:image/jpeg;base64,")


def test_decompression_bomb_raises_image_error(monkeypatch):
    # 32x24 is more than twice this limit, so Pillow refuses to open it
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
    data = make_image_bytes("PNG")
    with pytest.raises(ImageError):
        to_jpeg_bytes(data)
    with pytest.raises(ImageError):
        image_data_url(data)


def test_fetch_sample_image_returns_content(monkeypatch):
    calls = []

    def fake_get(url, timeout):
        calls.append((url, timeout))
        return FakeResponse(content=b"jpeg bytes")

    monkeypatch.setattr(requests, "get", fake_get)
    assert fetch_sample_image(SAMPLE_IMAGES[0]["url"]) == b"jpeg bytes"
    assert calls == [(SAMPLE_IMAGES[0]["url"], 20)]


@pytest.mark.parametrize("outcome", [
    requests.exceptions.ConnectionError("down"),
    FakeResponse(status_code=404),
    FakeResponse(content=b""),
])
def test_fetch_sample_image_failures_raise_service_error(monkeypatch, outcome):
    def fake_get(url, timeout):
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    monkeypatch.setattr(requests, "get", fake_get)
    with pytest.raises(ServiceError):
        fetch_sample_image("https://example.com/plant.jpg")
