"""
Image Upscaling Core Library

Raster buffer, upscaling algorithms and their registry, content analysis,
algorithm selection and the orchestration around them.
"""

__version__ = "0.1.0"

from .errors import (
    ImageUpscalingError,
    DimensionMismatch,
    OutOfRange,
    UnknownAlgorithm,
    DecodeFailure,
    EncodeFailure,
    ValidationError,
    PipelineError,
)
from .image import Image, Pixel, lerp, weighted_average
from .config import PipelineConfig

# Algorithms (importing the package fills the registry)
from .upsampling import (
    CostTier,
    Upscaler,
    output_size,
    get_upscaler,
    list_upscalers,
    all_upscalers,
    upscalers_by_tier,
)

from .analysis import ContentType, ContentProfile, analyze_content
from .strategy import select_algorithm, resolve_upscaler
from .preprocessing import QualityReport, detect_quality_issues
from .io import load_image, save_image
from .pipeline import UpscalePipeline, PipelineContext, compare_modes, process_traditional
from .benchmark import run_benchmark

__all__ = [
    '__version__',
    'ImageUpscalingError',
    'DimensionMismatch',
    'OutOfRange',
    'UnknownAlgorithm',
    'DecodeFailure',
    'EncodeFailure',
    'ValidationError',
    'PipelineError',
    'Image',
    'Pixel',
    'lerp',
    'weighted_average',
    'PipelineConfig',
    'CostTier',
    'Upscaler',
    'output_size',
    'get_upscaler',
    'list_upscalers',
    'all_upscalers',
    'upscalers_by_tier',
    'ContentType',
    'ContentProfile',
    'analyze_content',
    'select_algorithm',
    'resolve_upscaler',
    'QualityReport',
    'detect_quality_issues',
    'load_image',
    'save_image',
    'UpscalePipeline',
    'PipelineContext',
    'process_traditional',
    'compare_modes',
    'run_benchmark',
]
