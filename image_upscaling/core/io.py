"""
Image File I/O

Loads any format scikit-image can decode into an 8-bit RGB Image and writes
Images back out. Grayscale sources are expanded to RGB and alpha channels are
dropped.
"""

from pathlib import Path
from typing import Union

import numpy as np
from skimage import io as skio
from skimage.color import gray2rgb
from skimage.util import img_as_ubyte

from .config import SUPPORTED_EXTENSIONS
from .errors import DecodeFailure, EncodeFailure
from .image import Image


PathLike = Union[str, Path]


def to_rgb8(array: np.ndarray) -> np.ndarray:
    """Normalize a decoded array to ``(h, w, 3)`` uint8.

    Raises:
        ValueError: the array is not a 2-D grayscale or multi-channel image
    """
    if array.ndim == 3 and array.shape[2] in (1, 2):
        # Grayscale, optionally with alpha
        array = array[..., 0]
    if array.ndim == 2:
        array = gray2rgb(array)
    if array.ndim != 3 or array.shape[2] < 3:
        raise ValueError(f"Unsupported image shape {array.shape}")

    array = array[..., :3]
    if array.dtype != np.uint8:
        array = img_as_ubyte(array)
    return np.ascontiguousarray(array)


def load_image(path: PathLike) -> Image:
    """Read an image file.

    Args:
        path: File to decode

    Returns:
        RGB Image

    Raises:
        DecodeFailure: the file is missing or cannot be decoded
    """
    path = Path(path)
    if not path.is_file():
        raise DecodeFailure(path, "File not found")

    try:
        array = to_rgb8(skio.imread(str(path)))
    except Exception as exc:
        raise DecodeFailure(path, str(exc)) from exc

    return Image.from_array(array)


def save_image(image: Image, path: PathLike) -> Path:
    """Write an image; the format follows the file extension.

    Parent directories are created as needed.

    Raises:
        EncodeFailure: the extension is not a supported format, or the
            image could not be encoded or written
    """
    path = Path(path)
    if path.suffix.lower() not in SUPPORTED_EXTENSIONS:
        raise EncodeFailure(
            path,
            f"Unsupported image format '{path.suffix}'. Supported: {', '.join(SUPPORTED_EXTENSIONS)}"
        )

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        skio.imsave(str(path), image.to_array(), check_contrast=False)
    except Exception as exc:
        raise EncodeFailure(path, str(exc)) from exc
    return path
