"""
ASCII PPM (P3) image encoding.
"""

from __future__ import annotations
from pathlib import Path
from typing import Iterable, Union
import logging

import numpy as np

from .interval import Interval

logger = logging.getLogger(__name__)

INTENSITY = Interval(0.0, 1.0)


def format_pixel(r: float, g: float, b: float) -> str:
    """Encode one gamma-corrected color as "R G B".

    Channels are scaled by 255.99 and truncated towards zero, not rounded.
    NaN channels are written as 0.
    """
    return ' '.join(str(_channel(c)) for c in (r, g, b))


def _channel(c: float) -> int:
    c = float(c)
    if np.isnan(c):
        return 0
    return int(INTENSITY.clamp(c) * 255.99)


def header(width: int, height: int) -> str:
    return f"P3\n{width} {height}\n255\n"


def encode_pixels(pixels: Iterable) -> str:
    return '\n'.join(format_pixel(*p) for p in pixels)


def encode_ppm(image: np.ndarray) -> str:
    """Encode an image array as a complete P3 document.

    Args:
        image: Gamma-corrected colors of shape (height, width, 3), row 0 on top

    Returns:
        Header followed by one newline-separated triplet per pixel, row-major
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an array of shape (H, W, 3), got {image.shape}")
    height, width = image.shape[:2]
    return header(width, height) + encode_pixels(image.reshape(-1, 3))


def write_ppm(path: Union[str, Path], image: np.ndarray) -> Path:
    """Write the encoded image in one piece.

    Raises:
        OSError: If the file cannot be created or written
    """
    path = Path(path)
    content = encode_ppm(image)
    path.write_text(content, encoding='ascii')
    logger.info("Wrote %s (%d bytes)", path, len(content))
    return path
