"""
Pre- and Post-processing

Quality-issue detection from a content profile, and the two corrective
filters the pipeline applies before upscaling:
- denoise: 3x3 box mean
- sharpen: push each pixel away from its 4-neighbour average

Both filters touch interior pixels only; the one-pixel border is copied
unchanged. Channel math is integer, as on the 8-bit source.
"""

from dataclasses import dataclass, field
from typing import List

import numpy as np
from scipy import ndimage

from .analysis import ContentProfile, ContentType
from .config import LOW_SHARPNESS_THRESHOLD, NOISE_THRESHOLD
from .image import Image


BOX_KERNEL = np.ones((3, 3, 1), dtype=np.int32)

CROSS_KERNEL = np.array([
    [0, 1, 0],
    [1, 0, 1],
    [0, 1, 0],
], dtype=np.int32)[..., None]


@dataclass
class QualityReport:
    """Corrections suggested for an image before upscaling."""
    needs_denoising: bool = False
    needs_sharpening: bool = False
    issues: List[str] = field(default_factory=list)

    @property
    def has_issues(self) -> bool:
        return self.needs_denoising or self.needs_sharpening


def detect_quality_issues(profile: ContentProfile) -> QualityReport:
    """Decide which corrective filters apply to an image.

    Args:
        profile: Classifier output for the image

    Returns:
        QualityReport with one human-readable line per issue found
    """
    report = QualityReport()

    if profile.noise_level > NOISE_THRESHOLD:
        report.needs_denoising = True
        report.issues.append(f"High noise level ({profile.noise_level:.2f})")

    # Photographs are never sharpened
    if (profile.edge_sharpness < LOW_SHARPNESS_THRESHOLD
            and profile.content_type != ContentType.PHOTOGRAPHY):
        report.needs_sharpening = True
        report.issues.append(f"Low edge sharpness ({profile.edge_sharpness:.2f})")

    return report


def _interior(image: Image, filtered: np.ndarray) -> Image:
    out = image.to_array()
    if image.width > 2 and image.height > 2:
        out[1:-1, 1:-1] = filtered[1:-1, 1:-1]
    return Image._wrap(out)


def denoise(image: Image) -> Image:
    """3x3 box mean (integer floor) on interior pixels."""
    data = image.array.astype(np.int32)
    box_sum = ndimage.convolve(data, BOX_KERNEL, mode='nearest')
    return _interior(image, (box_sum // 9).astype(np.uint8))


def sharpen(image: Image) -> Image:
    """Interior pixels become ``c + trunc((c - avg4) / 2)``, clamped."""
    data = image.array.astype(np.int32)
    avg4 = ndimage.convolve(data, CROSS_KERNEL, mode='nearest') // 4
    boosted = data + np.trunc((data - avg4) / 2).astype(np.int32)
    return _interior(image, np.clip(boosted, 0, 255).astype(np.uint8))


def postprocess(image: Image) -> Image:
    """Post-upscale hook; currently returns a copy of the image."""
    return image.copy()
