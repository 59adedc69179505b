"""
Test configuration and fixtures for dominant color extraction tests.
"""
import io

import numpy as np
import pytest
from fastapi.testclient import TestClient
from PIL import Image

# Import the main app
from main import app


@pytest.fixture
def test_client():
    """Create test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def reset_metrics():
    """Reset metrics before each test."""
    from dominant_colors.utils.metrics import reset_metrics
    reset_metrics()


def encode_png(rgb: np.ndarray) -> bytes:
    """Encode an (H, W, 3) uint8 array as PNG bytes."""
    buffer = io.BytesIO()
    Image.fromarray(rgb.astype(np.uint8)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def red_blue_pixels():
    """60 pure red pixels followed by 40 pure blue pixels."""
    return np.vstack([
        np.full((60, 3), [255, 0, 0], dtype=np.uint8),
        np.full((40, 3), [0, 0, 255], dtype=np.uint8)
    ])


@pytest.fixture
def red_blue_png():
    """10x10 PNG: six red columns, four blue columns."""
    img = np.zeros((10, 10, 3), dtype=np.uint8)
    img[:, :6] = (255, 0, 0)
    img[:, 6:] = (0, 0, 255)
    return encode_png(img)
