"""
Image Upscaling Configuration

Centralizes the constants shared across algorithms, the classifier, the
pipeline and the CLI. Thresholds are expressed on the 8-bit channel scale.
"""

from dataclasses import dataclass, replace
from typing import Optional


# Pipeline defaults
DEFAULT_SCALE_FACTOR = 2.0
MAX_SCALE_FACTOR = 100.0
MIN_IMAGE_SIZE = 1
MAX_IMAGE_SIZE = 16384

# File extensions save_image will write
SUPPORTED_EXTENSIONS = ('.png', '.jpg', '.jpeg', '.bmp', '.tif', '.tiff', '.gif', '.webp')

# Algorithm used when no analysis runs (traditional mode, benchmark fallback)
DEFAULT_ALGORITHM = 'lanczos3'

# Edge-directed interpolation
EDGE_GRADIENT_THRESHOLD = 10.0
EDGE_SAMPLE_OFFSETS = (-1, 0, 1)
EDGE_SAMPLE_STEP = 0.5
EDGE_WEIGHT_FALLOFF = 0.3

# Scale-by-rules
RULES_COLOR_THRESHOLD = 30.0
RULES_ORTHOGONAL_BLEND = 0.5
RULES_DIAGONAL_BLEND = 0.3

# Iterative refiners
IBP_PRESETS = {
    'fast': {'iterations': 5, 'learning_rate': 0.5},
    'standard': {'iterations': 10, 'learning_rate': 0.5},
    'quality': {'iterations': 20, 'learning_rate': 0.3},
}
IBP_ERROR_BIAS = 128.0
TV_ITERATIONS = 15
TV_LAMBDA = 0.1
TV_EPSILON = 1e-6

# Content classifier
COLOR_SAMPLE_TARGET = 10000
COLOR_COUNT_CAP = 4096
EDGE_DETECT_THRESHOLD = 10.0
EDGE_SHARP_THRESHOLD = 50.0
SMOOTHNESS_TOLERANCE = 10.0
TEXT_BLOCK_SIZE = 8
TEXT_CONTRAST_THRESHOLD = 100

# Quality issues
NOISE_THRESHOLD = 0.15
LOW_SHARPNESS_THRESHOLD = 0.3

# Benchmark
BENCHMARK_REPORT_NAME = 'BENCHMARK.md'
BENCHMARK_STATS_NAME = 'benchmark_stats.json'


def validate_scale_factor(scale_factor: float) -> None:
    """Raise ValueError unless 0 < scale_factor <= MAX_SCALE_FACTOR."""
    if not (0.0 < scale_factor <= MAX_SCALE_FACTOR):
        raise ValueError(
            f"Scale factor must be in (0, {MAX_SCALE_FACTOR:g}], got {scale_factor}"
        )


@dataclass
class PipelineConfig:
    """Configuration threaded through the upscaling pipeline.

    Attributes:
        scale_factor: Output size multiplier (0 < s <= MAX_SCALE_FACTOR)
        force_algorithm: Registry key overriding the classifier recommendation
        enable_preprocessing: Run denoise/sharpen when quality issues are found
        enable_postprocessing: Run the post-processing hook
        verbose: Print stage progress
        min_size: Smallest accepted input width/height
        max_size: Largest accepted input width/height
    """
    scale_factor: float = DEFAULT_SCALE_FACTOR
    force_algorithm: Optional[str] = None
    enable_preprocessing: bool = True
    enable_postprocessing: bool = True
    verbose: bool = True
    min_size: int = MIN_IMAGE_SIZE
    max_size: int = MAX_IMAGE_SIZE

    def validate(self) -> None:
        validate_scale_factor(self.scale_factor)
        if self.min_size < 1 or self.max_size < self.min_size:
            raise ValueError(f"Invalid size limits: {self.min_size}..{self.max_size}")

    def with_algorithm(self, algorithm: Optional[str]) -> 'PipelineConfig':
        return replace(self, force_algorithm=algorithm)

    def with_preprocessing(self, enabled: bool) -> 'PipelineConfig':
        return replace(self, enable_preprocessing=enabled)

    def with_postprocessing(self, enabled: bool) -> 'PipelineConfig':
        return replace(self, enable_postprocessing=enabled)
