"""
Upscaler Interface

Defines the abstract base class every resampling algorithm implements, the
cost tiers used to group them, and the output-grid helpers they share.
"""

import math
from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Tuple

import numpy as np

from ..image import Image


class CostTier(IntEnum):
    """Descriptive cost class of an algorithm (ordered, not a priority)."""
    INSTANT = 0
    FAST = 1
    MEDIUM = 2
    SLOW = 3

    @property
    def description(self) -> str:
        return _TIER_DESCRIPTIONS[self]

    @classmethod
    def parse(cls, value: str) -> 'CostTier':
        try:
            return cls[value.strip().upper()]
        except KeyError:
            names = ', '.join(t.name.lower() for t in cls)
            raise ValueError(f"Unknown tier '{value}'. Available: {names}") from None


_TIER_DESCRIPTIONS = {
    CostTier.INSTANT: "Instant (nearest neighbor, bilinear)",
    CostTier.FAST: "Fast (bicubic, Lanczos)",
    CostTier.MEDIUM: "Medium (edge-directed, scale-by-rules)",
    CostTier.SLOW: "Slow (iterative optimization)",
}


def output_size(length: int, scale_factor: float) -> int:
    """Scaled length, rounded half away from zero, never below one pixel."""
    return max(1, int(math.floor(length * scale_factor + 0.5)))


def check_scale(scale_factor: float) -> float:
    scale_factor = float(scale_factor)
    if not math.isfinite(scale_factor) or scale_factor <= 0.0:
        raise ValueError(f"Scale factor must be a positive number, got {scale_factor}")
    return scale_factor


def source_coordinates(image: Image, scale_factor: float) -> Tuple[np.ndarray, np.ndarray]:
    """Pixel-centre source coordinates for every output column and row.

    Output pixel ``i`` samples the source at ``(i + 0.5) / s - 0.5``.

    Returns:
        (xs, ys) float arrays of length output width / output height
    """
    new_w = output_size(image.width, scale_factor)
    new_h = output_size(image.height, scale_factor)
    xs = (np.arange(new_w, dtype=np.float64) + 0.5) / scale_factor - 0.5
    ys = (np.arange(new_h, dtype=np.float64) + 0.5) / scale_factor - 0.5
    return xs, ys


def gather(data: np.ndarray, rows: np.ndarray, cols: np.ndarray) -> np.ndarray:
    """Clamped 2-D gather: ``data[clip(rows)][:, clip(cols)]`` as float.

    Args:
        data: ``(h, w, 3)`` source buffer
        rows: integer row indices (any range)
        cols: integer column indices (any range)

    Returns:
        ``(len(rows), len(cols), 3)`` float64 array
    """
    h, w = data.shape[:2]
    rows = np.clip(rows, 0, h - 1)
    cols = np.clip(cols, 0, w - 1)
    return data[rows[:, None], cols[None, :]].astype(np.float64)


class Upscaler(ABC):
    """Abstract base class for all upscaling algorithms.

    Subclasses implement ``_upscale``; the public ``upscale`` validates the
    scale factor first. Implementations never mutate the input image.
    """

    def __init__(self, show_progress: bool = False):
        self.show_progress = show_progress

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable algorithm name."""
        pass

    @property
    @abstractmethod
    def tier(self) -> CostTier:
        """Cost tier of the algorithm."""
        pass

    @abstractmethod
    def _upscale(self, image: Image, scale_factor: float) -> Image:
        pass

    def upscale(self, image: Image, scale_factor: float) -> Image:
        """Upscale ``image`` by ``scale_factor``.

        Output size is ``round(width * s) x round(height * s)``.

        Raises:
            ValueError: If the scale factor is not a positive number
        """
        return self._upscale(image, check_scale(scale_factor))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, tier={self.tier.name})"
