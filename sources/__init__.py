"""
Image source adapters.

Each source yields RGBA pixel buffers ready for the normalization pipeline.
"""

from .local import IMAGE_EXTENSIONS, load_pixel_buffer, scan_local_images

__all__ = [
    "IMAGE_EXTENSIONS",
    "load_pixel_buffer",
    "scan_local_images",
]
