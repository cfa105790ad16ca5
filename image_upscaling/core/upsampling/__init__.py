"""
Image Upscaling Methods

Every algorithm implements the Upscaler interface and registers itself under
one or more case-insensitive keys. Importing this package imports every
algorithm module, which fills the registry.
"""

from .base import CostTier, Upscaler, output_size, source_coordinates
from .registry import (
    register_upscaler,
    canonical_name,
    get_upscaler,
    get_upscaler_spec,
    list_upscalers,
    list_aliases,
    all_upscalers,
    upscalers_by_tier,
    names_by_tier,
    get_all_methods_info,
    UPSCALER_REGISTRY,
    UpscalerSpec,
)

# Import methods to register them
from . import kernels
from . import structural
from . import iterative

from .kernels import NearestNeighbor, Bilinear, Bicubic, Lanczos, cubic_kernel, lanczos_kernel
from .structural import EdgeDirected, ScaleByRules
from .iterative import IterativeBackProjection, TotalVariation, simulate_downsample

__all__ = [
    'CostTier',
    'Upscaler',
    'output_size',
    'source_coordinates',
    'register_upscaler',
    'canonical_name',
    'get_upscaler',
    'get_upscaler_spec',
    'list_upscalers',
    'list_aliases',
    'all_upscalers',
    'upscalers_by_tier',
    'names_by_tier',
    'get_all_methods_info',
    'UPSCALER_REGISTRY',
    'UpscalerSpec',
    'NearestNeighbor',
    'Bilinear',
    'Bicubic',
    'Lanczos',
    'cubic_kernel',
    'lanczos_kernel',
    'EdgeDirected',
    'ScaleByRules',
    'IterativeBackProjection',
    'TotalVariation',
    'simulate_downsample',
]
