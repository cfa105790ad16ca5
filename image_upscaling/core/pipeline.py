#!/usr/bin/env python3
"""
Upscaling Pipeline

Runs an image through ordered, named stages that share one context:

    load -> validate -> analyze -> detect_issues -> preprocess
         -> upscale -> postprocess -> save

The load and save stages exist only when file paths are given, so the same
pipeline also works on in-memory Images. Each stage is timed; the first
failing stage stops the run and is reported as a PipelineError.
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from .analysis import ContentProfile, analyze_content
from .config import DEFAULT_ALGORITHM, PipelineConfig, validate_scale_factor
from .errors import ImageUpscalingError, PipelineError, ValidationError
from .image import Image
from .io import load_image, save_image
from .preprocessing import QualityReport, denoise, detect_quality_issues, postprocess, sharpen
from .strategy import describe_selection, resolve_upscaler, select_algorithm
from .upsampling import get_upscaler


@dataclass
class PipelineContext:
    """State shared by the stages of one pipeline run.

    Attributes:
        config: Run configuration
        input_path: Source file (None for in-memory runs)
        output_path: Destination file (None for in-memory runs)
        image: Current working image; replaced by pre-processing
        profile: Classifier output
        quality: Quality issues found in the profile
        algorithm: Registry key of the upscaler used
        result: Final upscaled image
        timings: Seconds spent per stage, in execution order
    """
    config: PipelineConfig
    input_path: Optional[Path] = None
    output_path: Optional[Path] = None
    image: Optional[Image] = None
    profile: Optional[ContentProfile] = None
    quality: Optional[QualityReport] = None
    algorithm: Optional[str] = None
    result: Optional[Image] = None
    timings: Dict[str, float] = field(default_factory=dict)

    @property
    def total_time(self) -> float:
        return sum(self.timings.values())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for documentation/serialization."""
        return {
            'input_path': str(self.input_path) if self.input_path else None,
            'output_path': str(self.output_path) if self.output_path else None,
            'scale_factor': self.config.scale_factor,
            'input_size': list(self.image.size) if self.image else None,
            'output_size': list(self.result.size) if self.result else None,
            'algorithm': self.algorithm,
            'profile': self.profile.to_dict() if self.profile else None,
            'issues': list(self.quality.issues) if self.quality else [],
            'timings': dict(self.timings),
        }


@dataclass
class Stage:
    """One named step of the pipeline.

    Attributes:
        name: Stage identifier, used in timings and errors
        func: Callable that reads and updates the context
        description: Human-readable description
    """
    name: str
    func: Callable[[PipelineContext], None]
    description: str = ""

    def run(self, context: PipelineContext) -> float:
        """Run the stage and return its duration in seconds."""
        start = time.perf_counter()
        self.func(context)
        return time.perf_counter() - start


class UpscalePipeline:
    """Content-aware upscaling: analyze, correct, pick an algorithm, upscale."""

    def __init__(self, config: Optional[PipelineConfig] = None):
        self.config = config or PipelineConfig()
        self.config.validate()

    def _log(self, message: str):
        if self.config.verbose:
            print(message)

    # =========================================================================
    # Stages
    # =========================================================================

    def _load(self, context: PipelineContext):
        context.image = load_image(context.input_path)
        self._log(f"   Loaded {context.input_path} ({context.image.width}x{context.image.height})")

    def _validate(self, context: PipelineContext):
        width, height = context.image.size
        low, high = self.config.min_size, self.config.max_size
        if not (low <= width <= high and low <= height <= high):
            raise ValidationError(
                f"Image size {width}x{height} outside accepted range",
                f"Each dimension must be within {low}..{high}"
            )

    def _analyze(self, context: PipelineContext):
        context.profile = analyze_content(context.image)
        self._log(f"   Content type: {context.profile.content_type.value}")

    def _detect_issues(self, context: PipelineContext):
        context.quality = detect_quality_issues(context.profile)
        for issue in context.quality.issues:
            self._log(f"   Issue: {issue}")

    def _preprocess(self, context: PipelineContext):
        if context.quality.needs_denoising:
            context.image = denoise(context.image)
            self._log("   Applied denoising")
        if context.quality.needs_sharpening:
            context.image = sharpen(context.image)
            self._log("   Applied sharpening")

    def _upscale(self, context: PipelineContext):
        name, upscaler = resolve_upscaler(context.profile, self.config.force_algorithm)
        context.algorithm = name
        self._log(f"   Algorithm: {describe_selection(context.profile, self.config.force_algorithm)}")
        context.result = upscaler.upscale(context.image, self.config.scale_factor)
        self._log(f"   Output size: {context.result.width}x{context.result.height}")

    def _postprocess(self, context: PipelineContext):
        context.result = postprocess(context.result)

    def _save(self, context: PipelineContext):
        save_image(context.result, context.output_path)
        self._log(f"   Saved {context.output_path}")

    def stages(self, with_io: bool = False) -> List[Stage]:
        """Build the ordered stage list for the current configuration.

        Args:
            with_io: Include the file load and save stages
        """
        stages = [
            Stage('validate', self._validate, "Check image size limits"),
            Stage('analyze', self._analyze, "Classify image content"),
            Stage('detect_issues', self._detect_issues, "Find noise and softness"),
        ]
        if self.config.enable_preprocessing:
            stages.append(Stage('preprocess', self._preprocess, "Denoise and sharpen"))
        stages.append(Stage('upscale', self._upscale, "Select algorithm and upscale"))
        if self.config.enable_postprocessing:
            stages.append(Stage('postprocess', self._postprocess, "Post-processing hook"))

        if with_io:
            stages.insert(0, Stage('load', self._load, "Read the input file"))
            stages.append(Stage('save', self._save, "Write the output file"))
        return stages

    # =========================================================================
    # Runners
    # =========================================================================

    def _execute(self, context: PipelineContext, stages: List[Stage]) -> PipelineContext:
        for stage in stages:
            self._log(f"[{stage.name}] {stage.description}")
            try:
                context.timings[stage.name] = stage.run(context)
            except Exception as e:
                raise PipelineError(f"Stage '{stage.name}' failed: {e}", stage.name) from e
        self._log(f"Done in {context.total_time:.2f}s")
        return context

    def run(self, input_path: Union[str, Path], output_path: Union[str, Path]) -> PipelineContext:
        """Upscale a file and write the result.

        Raises:
            PipelineError: a stage failed; nothing is written
        """
        context = PipelineContext(
            config=self.config,
            input_path=Path(input_path),
            output_path=Path(output_path),
        )
        return self._execute(context, self.stages(with_io=True))

    def run_image(self, image: Image) -> PipelineContext:
        """Upscale an in-memory image; the result is in ``context.result``."""
        context = PipelineContext(config=self.config, image=image)
        return self._execute(context, self.stages(with_io=False))


def process_traditional(
    image: Image,
    algorithm: Optional[str] = None,
    scale_factor: float = 2.0
) -> Image:
    """Upscale directly with one algorithm, skipping analysis.

    Raises:
        ValueError: ``scale_factor`` is outside (0, MAX_SCALE_FACTOR]
        UnknownAlgorithm: ``algorithm`` is not registered
    """
    validate_scale_factor(scale_factor)
    return get_upscaler(algorithm or DEFAULT_ALGORITHM).upscale(image, scale_factor)


# =============================================================================
# Mode comparison
# =============================================================================

def comparison_paths(output_path: Union[str, Path]) -> Dict[str, Path]:
    """Output files written by :func:`compare_modes`, keyed by mode."""
    output_path = Path(output_path)
    suffix = output_path.suffix or '.png'
    return {
        mode: output_path.with_name(f"{output_path.stem}_{mode}{suffix}")
        for mode in ('traditional', 'pipeline')
    }


def compare_modes(
    input_path: Union[str, Path],
    output_path: Union[str, Path],
    scale_factor: float = 2.0,
    force_algorithm: Optional[str] = None,
    verbose: bool = True
) -> Dict[str, Any]:
    """Run one image through the traditional path and the full pipeline.

    Both runs use the same algorithm: ``force_algorithm`` when given,
    otherwise the classifier recommendation. Outputs go next to
    ``output_path`` as ``<stem>_traditional`` and ``<stem>_pipeline``.
    A failing mode is recorded and the other still runs.

    Returns:
        Stats dict with per-mode ``duration_s``/``output_path``/``error`` and
        ``overhead_pct`` (pipeline time relative to traditional, None unless
        both modes succeeded)

    Raises:
        DecodeFailure: the input cannot be loaded
        PipelineError: both modes failed
    """
    validate_scale_factor(scale_factor)
    image = load_image(input_path)
    profile = analyze_content(image)
    algorithm = select_algorithm(profile, force_algorithm)
    paths = comparison_paths(output_path)

    stats = {
        'input_path': str(input_path),
        'scale_factor': scale_factor,
        'algorithm': algorithm,
        'content_type': profile.content_type.value,
        'modes': {},
        'overhead_pct': None,
    }

    def record(mode: str, run: Callable[[], None]) -> None:
        if verbose:
            print(f"\n{mode.capitalize()} mode -> {paths[mode]}")
        start = time.perf_counter()
        try:
            run()
        except (ImageUpscalingError, ValueError) as e:
            stats['modes'][mode] = {'duration_s': None, 'output_path': None, 'error': str(e)}
            if verbose:
                print(f"  {mode.capitalize()} mode skipped: {e}")
            return
        stats['modes'][mode] = {
            'duration_s': time.perf_counter() - start,
            'output_path': str(paths[mode]),
            'error': None,
        }

    def run_traditional() -> None:
        source = load_image(input_path)
        save_image(process_traditional(source, algorithm, scale_factor), paths['traditional'])

    def run_pipeline() -> None:
        config = PipelineConfig(
            scale_factor=scale_factor,
            force_algorithm=force_algorithm,
            verbose=verbose,
        )
        UpscalePipeline(config).run(input_path, paths['pipeline'])

    record('traditional', run_traditional)
    record('pipeline', run_pipeline)

    trad = stats['modes']['traditional']['duration_s']
    pipe = stats['modes']['pipeline']['duration_s']
    if trad is None and pipe is None:
        raise PipelineError("All modes failed", 'compare')
    if trad and pipe is not None:
        stats['overhead_pct'] = (pipe / trad - 1.0) * 100.0

    if verbose:
        print_comparison(stats)
    return stats


def print_comparison(stats: Dict[str, Any]) -> None:
    """Print the duration/overhead table for a :func:`compare_modes` run."""
    print(f"\nComparison ({stats['algorithm']}, {stats['scale_factor']:g}x):")
    for mode, result in stats['modes'].items():
        if result['error'] is not None:
            print(f"  {mode:<12} SKIPPED")
            continue
        if mode == 'traditional':
            note = 'baseline'
        elif stats['overhead_pct'] is None:
            note = '---'
        else:
            note = f"{stats['overhead_pct']:+.1f}%"
        print(f"  {mode:<12} {result['duration_s']:8.3f}s  {note:>10}  {Path(result['output_path']).name}")
