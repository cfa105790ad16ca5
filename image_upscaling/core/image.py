"""
Raster Buffer

Fixed-size 8-bit RGB image stored as a row-major ``(height, width, 3)`` uint8
array, plus the small pixel-level helpers every resampler shares.

Pixel (x, y) lives at ``array[y, x]``, i.e. flat index ``y * width + x``.
Channel arithmetic is done in float and converted back with
``to_channels`` (round to nearest, clamp to [0, 255]).
"""

from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from .errors import DimensionMismatch, OutOfRange


def to_channels(values: np.ndarray) -> np.ndarray:
    """Round float channel values and clamp them into uint8."""
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)


class Pixel(NamedTuple):
    """Immutable RGB triple, each channel in [0, 255]."""
    r: int
    g: int
    b: int

    @classmethod
    def black(cls) -> 'Pixel':
        return cls(0, 0, 0)

    @classmethod
    def white(cls) -> 'Pixel':
        return cls(255, 255, 255)

    @classmethod
    def from_floats(cls, r: float, g: float, b: float) -> 'Pixel':
        r, g, b = to_channels(np.array([r, g, b], dtype=np.float64))
        return cls(int(r), int(g), int(b))


def lerp(a: Pixel, b: Pixel, t: float) -> Pixel:
    """Linear interpolation between two pixels, ``t`` clamped to [0, 1]."""
    t = min(max(t, 0.0), 1.0)
    return Pixel.from_floats(
        a.r + (b.r - a.r) * t,
        a.g + (b.g - a.g) * t,
        a.b + (b.b - a.b) * t,
    )


def weighted_average(pairs: Iterable[Tuple[Pixel, float]]) -> Pixel:
    """Weighted mean of ``(pixel, weight)`` pairs.

    Weights may be negative. An empty input or a zero weight sum yields
    black instead of dividing by zero.
    """
    r_sum = g_sum = b_sum = 0.0
    weight_sum = 0.0
    for pixel, weight in pairs:
        r_sum += pixel.r * weight
        g_sum += pixel.g * weight
        b_sum += pixel.b * weight
        weight_sum += weight

    if weight_sum == 0.0:
        return Pixel.black()

    return Pixel.from_floats(r_sum / weight_sum, g_sum / weight_sum, b_sum / weight_sum)


def weighted_mean(acc: np.ndarray, total: np.ndarray) -> np.ndarray:
    """Array form of :func:`weighted_average`.

    Args:
        acc: ``(h, w, 3)`` weighted channel sums
        total: ``(h, w)`` weight sums

    Returns:
        ``(h, w, 3)`` uint8 array; cells with zero total weight are black.
    """
    out = np.zeros(acc.shape, dtype=np.float64)
    np.divide(acc, total[..., None], out=out, where=(total[..., None] != 0))
    return to_channels(out)


class Image:
    """Fixed-size RGB raster.

    Every algorithm returns a new Image. ``set`` exists for building images
    and silently ignores writes outside the raster.
    """

    def __init__(self, width: int, height: int, data: Optional[np.ndarray] = None):
        width = int(width)
        height = int(height)
        if width <= 0 or height <= 0:
            raise ValueError(f"Image dimensions must be positive, got {width}x{height}")

        if data is None:
            data = np.zeros((height, width, 3), dtype=np.uint8)
        else:
            data = np.asarray(data)
            if data.shape != (height, width, 3):
                raise DimensionMismatch(width, height, data.size // 3)
            if data.dtype != np.uint8:
                data = to_channels(data)
            else:
                data = data.copy()

        self._width = width
        self._height = height
        self._data = data

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def new(cls, width: int, height: int, fill: Optional[Pixel] = None) -> 'Image':
        """Create a solid image (black unless ``fill`` is given)."""
        image = cls(width, height)
        if fill is not None:
            image._data[...] = np.asarray(fill, dtype=np.uint8)
        return image

    @classmethod
    def from_pixels(cls, width: int, height: int, pixels: Sequence[Sequence[int]]) -> 'Image':
        """Create an image from a row-major sequence of RGB triples."""
        if len(pixels) != width * height:
            raise DimensionMismatch(width, height, len(pixels))
        data = np.asarray(pixels, dtype=np.float64).reshape(height, width, 3)
        return cls(width, height, to_channels(data))

    @classmethod
    def from_array(cls, array: np.ndarray) -> 'Image':
        """Create an image from an ``(h, w, 3)`` array (values clamped)."""
        array = np.asarray(array)
        if array.ndim != 3 or array.shape[2] != 3:
            raise ValueError(f"Expected an (h, w, 3) array, got shape {array.shape}")
        return cls(array.shape[1], array.shape[0], array)

    @classmethod
    def _wrap(cls, data: np.ndarray) -> 'Image':
        # Takes ownership of an algorithm's freshly built uint8 buffer.
        image = cls.__new__(cls)
        image._height, image._width = data.shape[:2]
        image._data = data
        return image

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def size(self) -> Tuple[int, int]:
        return self._width, self._height

    @property
    def array(self) -> np.ndarray:
        """Read-only view of the underlying ``(h, w, 3)`` uint8 buffer."""
        view = self._data.view()
        view.flags.writeable = False
        return view

    @property
    def pixels(self) -> List[Pixel]:
        """Row-major list of every pixel."""
        return [Pixel(int(r), int(g), int(b)) for r, g, b in self._data.reshape(-1, 3)]

    def to_array(self) -> np.ndarray:
        """Independent copy of the pixel buffer."""
        return self._data.copy()

    def get(self, x: int, y: int) -> Pixel:
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise OutOfRange(x, y, self._width, self._height)
        r, g, b = self._data[y, x]
        return Pixel(int(r), int(g), int(b))

    def get_clamped(self, x: int, y: int) -> Pixel:
        """Read with each axis clamped into the raster; never raises."""
        x = min(max(int(x), 0), self._width - 1)
        y = min(max(int(y), 0), self._height - 1)
        r, g, b = self._data[y, x]
        return Pixel(int(r), int(g), int(b))

    def set(self, x: int, y: int, pixel: Sequence[int]) -> None:
        """Write a pixel; out-of-bounds writes are ignored."""
        if 0 <= x < self._width and 0 <= y < self._height:
            self._data[y, x] = to_channels(np.asarray(pixel, dtype=np.float64))

    def copy(self) -> 'Image':
        return Image._wrap(self._data.copy())

    def __eq__(self, other) -> bool:
        if not isinstance(other, Image):
            return NotImplemented
        return self.size == other.size and np.array_equal(self._data, other._data)

    __hash__ = None

    def __repr__(self) -> str:
        return f"Image({self._width}x{self._height})"
