"""
Dominant Colors Imaging Utilities
Decodes images, downscales them and flattens them into RGB pixel arrays.
"""
import io
from pathlib import Path
from typing import Optional, Tuple, Union

import cv2
import numpy as np
from loguru import logger
from PIL import Image

from dominant_colors.config import config
from dominant_colors.services.colors.options import ImageOptions

ImageSource = Union[str, Path, bytes]

EMPTY_PIXELS = np.empty((0, 3), dtype=np.uint8)


def load_image(source: ImageSource) -> np.ndarray:
    """
    Decode an image file or raw bytes to an RGB numpy array.

    Animated images contribute their first frame only.

    Raises:
        OSError: If the data cannot be read or decoded
    """
    if isinstance(source, bytes):
        pil_image = Image.open(io.BytesIO(source))
    else:
        pil_image = Image.open(source)

    with pil_image:
        pil_image.seek(0)
        if pil_image.mode != 'RGB':
            pil_image = pil_image.convert('RGB')
        return np.array(pil_image, dtype=np.uint8)


def bounded_size(width: int, height: int, max_width: int, max_height: int) -> Tuple[int, int]:
    """
    Compute the downscaled size for an image exceeding either bound.

    The dimension that overshoots its bound the most is pinned to that bound
    and the other one follows the aspect ratio (floored, never below 1).
    """
    if width <= max_width and height <= max_height:
        return width, height

    ratio = width / height if height > 0 else 0
    if width - max_width > height - max_height:
        new_width = max_width
        new_height = int(new_width // ratio) if ratio > 0 else 0
    else:
        new_height = max_height
        new_width = int(ratio * new_height)

    return max(new_width, 1), max(new_height, 1)


def resize_bounded(img_rgb: np.ndarray, options: ImageOptions) -> np.ndarray:
    """
    Downscale an image so it fits within the configured width and height.

    Args:
        img_rgb: Input image (H, W, 3)
        options: Resize bounds

    Returns:
        Resized image, or the input unchanged when it already fits
    """
    height, width = img_rgb.shape[:2]
    new_width, new_height = bounded_size(width, height, options.resize_width, options.resize_height)

    if (new_width, new_height) == (width, height):
        return img_rgb

    logger.debug(f"Resizing {width}x{height} -> {new_width}x{new_height}")
    # INTER_AREA for downscaling (better quality)
    return cv2.resize(img_rgb, (new_width, new_height), interpolation=cv2.INTER_AREA)


def image_to_pixels(img_rgb: np.ndarray) -> np.ndarray:
    """Flatten an (H, W, 3) image to (N, 3) pixels, scanning columns left to right."""
    return np.ascontiguousarray(img_rgb.transpose(1, 0, 2).reshape(-1, 3))


def load_pixels(source: ImageSource, options: Optional[ImageOptions] = None,
                filename: Optional[str] = None) -> np.ndarray:
    """
    Load an image as a flat array of RGB pixels.

    Unsupported extensions and unreadable data are logged and produce an
    empty pixel array; the clustering core reports that as EmptyInput.

    Args:
        source: File path or raw image bytes
        options: Resize bounds (defaults from config)
        filename: Name used for the extension check when source is bytes

    Returns:
        RGB pixels (N, 3) uint8
    """
    if options is None:
        options = ImageOptions()

    name = filename if filename is not None else (None if isinstance(source, bytes) else str(source))
    if name is not None and not config.validate_extension(name):
        logger.warning(
            f"Unsupported image extension for '{name}'. "
            f"Supported: {', '.join(sorted(config.SUPPORTED_EXTENSIONS))}"
        )
        return EMPTY_PIXELS

    try:
        img_rgb = load_image(source)
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        logger.warning(f"Failed to decode image {name or '<bytes>'}: {e}")
        return EMPTY_PIXELS

    img_rgb = resize_bounded(img_rgb, options)
    pixels = image_to_pixels(img_rgb)
    logger.info(f"Loaded {len(pixels)} pixels from {name or '<bytes>'}")
    return pixels
