"""
Image Upscaling - Content-Aware Image Upscaling

Upscales 8-bit RGB images with a family of resampling algorithms grouped into
cost tiers, and picks one automatically from a classification of the image
content.
"""

__version__ = "0.1.0"

# Re-export core components for convenience
from image_upscaling.core import (
    Image,
    Pixel,
    PipelineConfig,
    CostTier,
    Upscaler,
    get_upscaler,
    list_upscalers,
    all_upscalers,
    upscalers_by_tier,
    ContentType,
    ContentProfile,
    analyze_content,
    select_algorithm,
    load_image,
    save_image,
    UpscalePipeline,
    process_traditional,
    compare_modes,
    ImageUpscalingError,
)

__all__ = [
    '__version__',
    'Image',
    'Pixel',
    'PipelineConfig',
    'CostTier',
    'Upscaler',
    'get_upscaler',
    'list_upscalers',
    'all_upscalers',
    'upscalers_by_tier',
    'ContentType',
    'ContentProfile',
    'analyze_content',
    'select_algorithm',
    'load_image',
    'save_image',
    'UpscalePipeline',
    'process_traditional',
    'compare_modes',
    'ImageUpscalingError',
]
