"""
Pytest configuration and fixtures
"""
import base64
import io
import os
import sys

import pytest
from PIL import Image

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Set test environment variables
os.environ['FLASK_ENV'] = 'testing'
os.environ['TESTING'] = 'True'


@pytest.fixture
def app():
    """Create application instance for testing"""
    from server import app
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    """Create test client"""
    return app.test_client()


@pytest.fixture(autouse=True)
def fresh_rate_limiter(monkeypatch):
    """Give every test its own rate-limit table"""
    import trueframe_ai
    from core.rate_limiter import FixedWindowRateLimiter

    limiter = FixedWindowRateLimiter(max_requests=20, window_seconds=60)
    monkeypatch.setattr(trueframe_ai, 'rate_limiter', limiter)
    return limiter


def make_image_bytes(size=(50, 50), color=(128, 128, 128), fmt='JPEG', mode='RGB', exif=None):
    image = Image.new(mode, size, color)
    buffer = io.BytesIO()
    kwargs = {}
    if exif is not None:
        kwargs['exif'] = exif
    image.save(buffer, format=fmt, **kwargs)
    return buffer.getvalue()


def make_noise_bytes(size=(256, 192), seed=7):
    import numpy as np
    rng = np.random.default_rng(seed)
    pixels = rng.integers(0, 256, size=(size[1], size[0], 3), dtype=np.uint8)
    buffer = io.BytesIO()
    Image.fromarray(pixels).save(buffer, format='PNG')
    return buffer.getvalue()


def to_data_url(data, mime='image/jpeg'):
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


@pytest.fixture
def gray_jpeg():
    """50x50 solid gray JPEG"""
    return make_image_bytes()


@pytest.fixture
def gray_data_url(gray_jpeg):
    return to_data_url(gray_jpeg)


@pytest.fixture
def noise_png():
    return make_noise_bytes()
