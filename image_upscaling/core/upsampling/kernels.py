"""
Kernel Upscaling Methods

Point-sampling resamplers evaluated independently per output pixel:
- Nearest neighbor (pixel replication)
- Bilinear (2x2 neighbourhood)
- Bicubic (Catmull-Rom, 4x4 neighbourhood)
- Lanczos (windowed sinc, 2..4 lobes)

All methods except nearest neighbor sample the source at the pixel-centre
mapped coordinate and read neighbours through clamped indices, so image
borders need no special casing. Every loop is vectorised over the full output
grid; one pass per kernel tap.
"""

from typing import Callable, Iterable

import numpy as np

from ..image import Image, to_channels, weighted_mean
from .base import CostTier, Upscaler, gather, output_size, source_coordinates
from .registry import register_upscaler


# =============================================================================
# Kernels
# =============================================================================

def cubic_kernel(t):
    """Catmull-Rom cubic kernel (a = -0.5).

    Works on scalars and arrays; returns the same kind it was given.
    """
    t = np.abs(np.asarray(t, dtype=np.float64))
    t2 = t * t
    t3 = t2 * t
    w = np.where(
        t < 1.0,
        1.5 * t3 - 2.5 * t2 + 1.0,
        np.where(t < 2.0, -0.5 * t3 + 2.5 * t2 - 4.0 * t + 2.0, 0.0)
    )
    return w if w.ndim else float(w)


def lanczos_kernel(t, lobes: int):
    """Lanczos kernel ``sinc(t) * sinc(t / lobes)`` (normalized sinc).

    Exactly 1.0 at t = 0 and 0.0 for |t| >= lobes.
    """
    t = np.abs(np.asarray(t, dtype=np.float64))
    w = np.where(
        t < np.finfo(np.float64).eps,
        1.0,
        np.where(t < lobes, np.sinc(t) * np.sinc(t / lobes), 0.0)
    )
    return w if w.ndim else float(w)


def resample_separable(
    image: Image,
    scale_factor: float,
    kernel: Callable[[np.ndarray], np.ndarray],
    taps: Iterable[int]
) -> Image:
    """Separable kernel resampling over a square tap neighbourhood.

    Each output pixel is the weighted average of the source pixels at
    ``floor(src) + (dx, dy)`` for every ``dx, dy`` in ``taps``, with weight
    ``kernel(dx - fx) * kernel(dy - fy)``. Weights may be negative; a zero
    weight sum produces black.
    """
    xs, ys = source_coordinates(image, scale_factor)
    x0 = np.floor(xs).astype(np.intp)
    y0 = np.floor(ys).astype(np.intp)
    fx = xs - x0
    fy = ys - y0

    data = image.array
    taps = list(taps)
    acc = np.zeros((len(ys), len(xs), 3), dtype=np.float64)
    total = np.zeros((len(ys), len(xs)), dtype=np.float64)

    x_weights = [kernel(dx - fx) for dx in taps]
    for dy in taps:
        wy = kernel(dy - fy)
        for dx, wx in zip(taps, x_weights):
            w = np.outer(wy, wx)
            acc += gather(data, y0 + dy, x0 + dx) * w[..., None]
            total += w

    return Image._wrap(weighted_mean(acc, total))


def bilinear_grid(data: np.ndarray, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
    """Bilinear samples of ``data`` at every (xs[j], ys[i]) as a float array."""
    x0 = np.floor(xs).astype(np.intp)
    y0 = np.floor(ys).astype(np.intp)
    fx = (xs - x0)[None, :, None]
    fy = (ys - y0)[:, None, None]

    p00 = gather(data, y0, x0)
    p10 = gather(data, y0, x0 + 1)
    p01 = gather(data, y0 + 1, x0)
    p11 = gather(data, y0 + 1, x0 + 1)

    top = p00 + (p10 - p00) * fx
    bottom = p01 + (p11 - p01) * fx
    return top + (bottom - top) * fy


# =============================================================================
# Instant Tier
# =============================================================================

@register_upscaler(
    name='nearest',
    aliases=('nearest_neighbor',),
    preserves='exact source colors, hard pixel edges',
    introduces='blocky artifacts at non-integer scales'
)
class NearestNeighbor(Upscaler):
    """Nearest neighbor: replicates source pixels, no interpolation."""

    @property
    def name(self) -> str:
        return "Nearest Neighbor"

    @property
    def tier(self) -> CostTier:
        return CostTier.INSTANT

    def _upscale(self, image: Image, scale_factor: float) -> Image:
        new_w = output_size(image.width, scale_factor)
        new_h = output_size(image.height, scale_factor)

        # No half-pixel offset: output x maps to floor(x / s)
        cols = np.floor(np.arange(new_w) / scale_factor).astype(np.intp)
        rows = np.floor(np.arange(new_h) / scale_factor).astype(np.intp)
        cols = np.clip(cols, 0, image.width - 1)
        rows = np.clip(rows, 0, image.height - 1)

        return Image._wrap(image.array[rows[:, None], cols[None, :]])


@register_upscaler(
    name='bilinear',
    preserves='linear gradients',
    introduces='slight blurring, no overshoot'
)
class Bilinear(Upscaler):
    """Bilinear interpolation over the 2x2 neighbourhood."""

    @property
    def name(self) -> str:
        return "Bilinear"

    @property
    def tier(self) -> CostTier:
        return CostTier.INSTANT

    def _upscale(self, image: Image, scale_factor: float) -> Image:
        xs, ys = source_coordinates(image, scale_factor)
        return Image._wrap(to_channels(bilinear_grid(image.array, xs, ys)))


# =============================================================================
# Fast Tier
# =============================================================================

@register_upscaler(
    name='bicubic',
    preserves='smooth curves, good for continuous tone',
    introduces='slight ringing at sharp edges'
)
class Bicubic(Upscaler):
    """Bicubic (Catmull-Rom) interpolation over the 4x4 neighbourhood."""

    TAPS = range(-1, 3)

    @property
    def name(self) -> str:
        return "Bicubic"

    @property
    def tier(self) -> CostTier:
        return CostTier.FAST

    def _upscale(self, image: Image, scale_factor: float) -> Image:
        return resample_separable(image, scale_factor, cubic_kernel, self.TAPS)


@register_upscaler(
    name='lanczos4',
    default_params={'lobes': 4},
    preserves='finest detail of the kernel methods',
    introduces='most ringing, 8x8 taps per pixel'
)
@register_upscaler(
    name='lanczos3',
    aliases=('lanczos',),
    default_params={'lobes': 3},
    preserves='sharp edges with smooth interpolation',
    introduces='controlled ringing'
)
@register_upscaler(
    name='lanczos2',
    default_params={'lobes': 2},
    preserves='sharp edges at lower cost',
    introduces='mild ringing, slightly softer than lanczos3'
)
class Lanczos(Upscaler):
    """Lanczos windowed-sinc interpolation."""

    SUPPORTED_LOBES = (2, 3, 4)

    def __init__(self, lobes: int = 3, show_progress: bool = False):
        super().__init__(show_progress=show_progress)
        if lobes not in self.SUPPORTED_LOBES:
            raise ValueError(f"Lanczos lobes must be one of {self.SUPPORTED_LOBES}, got {lobes}")
        self.lobes = lobes

    @classmethod
    def fast(cls) -> 'Lanczos':
        return cls(lobes=2)

    @classmethod
    def high_quality(cls) -> 'Lanczos':
        return cls(lobes=4)

    @property
    def name(self) -> str:
        return f"Lanczos{self.lobes}"

    @property
    def tier(self) -> CostTier:
        return CostTier.FAST

    def kernel(self, t):
        return lanczos_kernel(t, self.lobes)

    def _upscale(self, image: Image, scale_factor: float) -> Image:
        taps = range(1 - self.lobes, self.lobes + 1)
        return resample_separable(image, scale_factor, self.kernel, taps)
