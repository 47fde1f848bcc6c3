"""
Local image files as pipeline input.

Finds image files on disk and decodes them into RGBA pixel buffers the way
the drawing pad ingests an upload: stretched onto an opaque black pad.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Union

from PIL import Image, UnidentifiedImageError

from config import PAD_SIZE
from digitprep import PixelBuffer

logger = logging.getLogger(__name__)

# Supported image extensions
IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".bmp", ".gif", ".webp", ".tif", ".tiff"}

ImageSource = Union[str, Path, bytes]


def scan_local_images(path: str | Path) -> list[Path]:
    """Find all image files in a directory, or return a single image file.

    Args:
        path: Directory or single image file.

    Returns:
        Sorted list of image file paths (non-recursive for directories).

    Raises:
        ValueError: If path doesn't exist or isn't a supported image/directory.
    """
    file_path = Path(path).resolve()

    if file_path.is_file():
        if file_path.suffix.lower() in IMAGE_EXTENSIONS:
            return [file_path]
        raise ValueError(f"{path} is not a supported image file")

    if not file_path.is_dir():
        raise ValueError(f"{path} is not a valid file or directory")

    return sorted(
        p for p in file_path.iterdir()
        if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS
    )


def load_pixel_buffer(
    source: ImageSource,
    size: tuple[int, int] | None = PAD_SIZE,
) -> PixelBuffer:
    """Decode an image into an RGBA PixelBuffer.

    Transparent areas are composited over black, matching the pad's black
    background, and the image is stretched to `size` (width, height) without
    preserving aspect ratio, as the pad does.

    Args:
        source: File path or encoded image bytes.
        size: Target (width, height), or None to keep the native size.

    Returns:
        PixelBuffer with opaque pixels.

    Raises:
        ValueError: If the data cannot be decoded or size is not positive.
        OSError: If the file cannot be read.
    """
    if size is not None and (size[0] <= 0 or size[1] <= 0):
        raise ValueError(f"size must be positive, got {size}")

    handle = io.BytesIO(source) if isinstance(source, bytes) else source
    try:
        with Image.open(handle) as img:
            rgba = img.convert("RGBA")
    except UnidentifiedImageError as exc:
        raise ValueError(f"Cannot decode image: {exc}") from exc

    pad = Image.new("RGBA", rgba.size, (0, 0, 0, 255))
    pad.alpha_composite(rgba)

    if size is not None and pad.size != tuple(size):
        logger.debug("Stretching %sx%s image to %sx%s", *pad.size, *size)
        pad = pad.resize(tuple(size), Image.Resampling.BILINEAR)

    return PixelBuffer(pad.tobytes(), pad.width, pad.height)
