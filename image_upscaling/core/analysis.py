#!/usr/bin/env python3
"""
Image Content Analyzer

Measures five scalar statistics of an image and maps them to a content
category through a fixed, order-sensitive decision table. Each category
carries the registry key of the algorithm recommended for it.

NOTE: This module is READ-ONLY on the image. The same image always yields
the same ContentProfile.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict

import numpy as np

from .config import (
    COLOR_COUNT_CAP,
    COLOR_SAMPLE_TARGET,
    EDGE_DETECT_THRESHOLD,
    EDGE_SHARP_THRESHOLD,
    SMOOTHNESS_TOLERANCE,
    TEXT_BLOCK_SIZE,
    TEXT_CONTRAST_THRESHOLD,
)
from .image import Image


class ContentType(Enum):
    """Content categories produced by the classifier."""
    PIXEL_ART = 'PixelArt'
    PHOTOGRAPHY = 'Photography'
    TEXT = 'Text'
    SCREENSHOT = 'Screenshot'
    ARTWORK = 'Artwork'
    MIXED = 'Mixed'

    @property
    def recommended_algorithm(self) -> str:
        """Registry key of the algorithm recommended for this content."""
        return _RECOMMENDED[self]

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_RECOMMENDED = {
    ContentType.PIXEL_ART: 'nearest',
    ContentType.PHOTOGRAPHY: 'lanczos3',
    ContentType.TEXT: 'nearest',
    ContentType.SCREENSHOT: 'bicubic',
    ContentType.ARTWORK: 'lanczos3',
    ContentType.MIXED: 'bicubic',
}

_DESCRIPTIONS = {
    ContentType.PIXEL_ART: "Pixel art with sharp edges and limited colors",
    ContentType.PHOTOGRAPHY: "Natural photography with smooth gradients",
    ContentType.TEXT: "Text or line art with high contrast",
    ContentType.SCREENSHOT: "Screenshot with mixed content",
    ContentType.ARTWORK: "Digital artwork or paintings",
    ContentType.MIXED: "Mixed content types",
}


@dataclass(frozen=True)
class ContentProfile:
    """Measured statistics of one image plus the derived category.

    Attributes:
        content_type: Category from the decision table
        color_count: Distinct 24-bit colors in the sample (capped at 4097)
        edge_sharpness: Fraction of detected edges that are sharp [0, 1]
        gradient_smoothness: Fraction of row triples with consistent steps [0, 1]
        text_likelihood: Fraction of high-contrast 8x8 blocks [0, 1]
        noise_level: Mean deviation from the 4-neighbour average / 255 [0, 1]
    """
    content_type: ContentType
    color_count: int
    edge_sharpness: float
    gradient_smoothness: float
    text_likelihood: float
    noise_level: float

    @property
    def recommended_algorithm(self) -> str:
        return self.content_type.recommended_algorithm

    def summary(self) -> str:
        """Generate a text summary of the profile."""
        lines = [
            "Content Analysis:",
            f"  Type:              {self.content_type.value}",
            f"  Unique colors:     {self.color_count}",
            f"  Edge sharpness:    {self.edge_sharpness:.2f}",
            f"  Gradient smooth:   {self.gradient_smoothness:.2f}",
            f"  Text likelihood:   {self.text_likelihood:.2f}",
            f"  Noise level:       {self.noise_level:.2f}",
            f"  Recommended algo:  {self.recommended_algorithm}",
        ]
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'content_type': self.content_type.value,
            'color_count': self.color_count,
            'edge_sharpness': self.edge_sharpness,
            'gradient_smoothness': self.gradient_smoothness,
            'text_likelihood': self.text_likelihood,
            'noise_level': self.noise_level,
            'recommended_algorithm': self.recommended_algorithm,
        }


# =============================================================================
# Metrics
# =============================================================================

def pixel_diff(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Mean absolute channel difference along the last axis."""
    return np.abs(a - b).sum(axis=-1) / 3.0


def count_unique_colors(data: np.ndarray) -> int:
    """Count distinct 24-bit colors over a strided sample.

    The stride keeps roughly 10,000 pixels; the count stops growing once it
    passes 4096 (clearly not pixel art).
    """
    h, w = data.shape[:2]
    step = max(1, (w * h) // COLOR_SAMPLE_TARGET)
    sample = data.reshape(-1, 3)[::step].astype(np.uint32)
    codes = (sample[:, 0] << 16) | (sample[:, 1] << 8) | sample[:, 2]
    return min(len(np.unique(codes)), COLOR_COUNT_CAP + 1)


def calculate_edge_sharpness(data: np.ndarray) -> float:
    """Fraction of interior edges (diff > 10) that are sharp (diff > 50)."""
    h, w = data.shape[:2]
    if h < 3 or w < 3:
        return 0.0

    f = data.astype(np.float64)
    center = f[1:h - 1, 1:w - 1]
    diff_h = pixel_diff(center, f[1:h - 1, 2:w])
    diff_v = pixel_diff(center, f[2:h, 1:w - 1])

    edges = (diff_h > EDGE_DETECT_THRESHOLD) | (diff_v > EDGE_DETECT_THRESHOLD)
    sharp = (diff_h > EDGE_SHARP_THRESHOLD) | (diff_v > EDGE_SHARP_THRESHOLD)

    total = int(edges.sum())
    if total == 0:
        return 0.0
    return float(sharp.sum()) / total


def calculate_gradient_smoothness(data: np.ndarray) -> float:
    """Fraction of row triples whose two successive steps agree within 10."""
    h, w = data.shape[:2]
    if h < 5 or w < 5:
        return 0.0

    f = data.astype(np.float64)
    p1 = f[2:h - 2, 2:w - 2]
    p2 = f[2:h - 2, 3:w - 1]
    p3 = f[2:h - 2, 4:w]

    smooth = np.abs(pixel_diff(p1, p2) - pixel_diff(p2, p3)) < SMOOTHNESS_TOLERANCE
    return float(smooth.mean())


def detect_text_regions(data: np.ndarray) -> float:
    """Fraction of 8x8 blocks whose brightness range exceeds 100.

    Brightness is the integer mean of the three channels. Partial blocks at
    the right/bottom edges count as blocks.
    """
    h, w = data.shape[:2]
    block = TEXT_BLOCK_SIZE
    brightness = data.astype(np.int32).sum(axis=-1) // 3

    # Edge padding repeats the last row/column, which sits in the same block
    brightness = np.pad(brightness, ((0, (-h) % block), (0, (-w) % block)), mode='edge')
    bh = brightness.shape[0] // block
    bw = brightness.shape[1] // block
    blocks = brightness.reshape(bh, block, bw, block)

    spread = blocks.max(axis=(1, 3)) - blocks.min(axis=(1, 3))
    return float((spread > TEXT_CONTRAST_THRESHOLD).mean())


def calculate_noise_level(data: np.ndarray) -> float:
    """Mean absolute deviation from the 4-neighbour average, scaled by 1/255."""
    h, w = data.shape[:2]
    if h < 3 or w < 3:
        return 0.0

    f = data.astype(np.float64)
    center = f[1:h - 1, 1:w - 1]
    neighbours = (f[1:h - 1, :w - 2] + f[1:h - 1, 2:] + f[:h - 2, 1:w - 1] + f[2:, 1:w - 1]) / 4.0

    noise = np.abs(center - neighbours).mean(axis=-1)
    return float(noise.mean()) / 255.0


# =============================================================================
# Classification
# =============================================================================

def classify_content(
    color_count: int,
    edge_sharpness: float,
    gradient_smoothness: float,
    text_likelihood: float
) -> ContentType:
    """Decision table, evaluated top to bottom; first match wins."""
    if color_count < 256 and edge_sharpness > 0.7:
        return ContentType.PIXEL_ART

    if text_likelihood > 0.5 and edge_sharpness > 0.6:
        return ContentType.TEXT

    if 0.3 < text_likelihood < 0.6:
        return ContentType.SCREENSHOT

    if gradient_smoothness > 0.6 and color_count > 4096:
        return ContentType.PHOTOGRAPHY

    if 256 < color_count < 8192:
        return ContentType.ARTWORK

    return ContentType.MIXED


def analyze_content(image: Image) -> ContentProfile:
    """Measure an image and classify its content.

    Args:
        image: Source image

    Returns:
        ContentProfile with all five metrics and the derived category
    """
    data = image.array
    color_count = count_unique_colors(data)
    edge_sharpness = calculate_edge_sharpness(data)
    gradient_smoothness = calculate_gradient_smoothness(data)
    text_likelihood = detect_text_regions(data)
    noise_level = calculate_noise_level(data)

    content_type = classify_content(
        color_count,
        edge_sharpness,
        gradient_smoothness,
        text_likelihood,
    )

    return ContentProfile(
        content_type=content_type,
        color_count=color_count,
        edge_sharpness=edge_sharpness,
        gradient_smoothness=gradient_smoothness,
        text_likelihood=text_likelihood,
        noise_level=noise_level,
    )
