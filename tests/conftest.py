from io import BytesIO

import httpx
import numpy as np
import pytest
from PIL import Image

from app.core.config import settings


def make_pixels(width, height, fill=(255, 255, 255, 255)):
    arr = np.zeros((height, width, 4), dtype=np.uint8)
    arr[:, :] = fill
    return arr


def encode_png(pixels) -> bytes:
    out = BytesIO()
    Image.fromarray(np.asarray(pixels, dtype=np.uint8)).save(out, format="PNG")
    return out.getvalue()


def image_transport(status_code=200, content=b"\x89PNG fake", content_type="image/png"):
    """MockTransport that answers every request the same way and records URLs."""
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(status_code, content=content, headers={"content-type": content_type})

    transport = httpx.MockTransport(handler)
    transport.seen = seen
    return transport


@pytest.fixture(autouse=True)
def fast_batches(monkeypatch):
    monkeypatch.setattr(settings, "BATCH_RETRY_DELAY", 0.0)
    monkeypatch.setattr(settings, "VECTORIZE_BY_DEFAULT", False)
