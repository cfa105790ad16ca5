import pytest

from conftest import checker
from image_upscaling.core.config import PipelineConfig
from image_upscaling.core.errors import PipelineError, UnknownAlgorithm, ValidationError
from image_upscaling.core.io import load_image, save_image
from image_upscaling.core import pipeline as pipeline_module
from image_upscaling.core.pipeline import UpscalePipeline, compare_modes, comparison_paths, process_traditional
from image_upscaling.core.upsampling import NearestNeighbor


def quiet_config(**kwargs):
    return PipelineConfig(verbose=False, **kwargs)


# =============================================================================
# Configuration
# =============================================================================

@pytest.mark.parametrize("scale", [0.0, -2.0, 100.5])
def test_config_rejects_bad_scale(scale):
    with pytest.raises(ValueError):
        PipelineConfig(scale_factor=scale).validate()


def test_config_fluent_helpers():
    base = PipelineConfig()
    forced = base.with_algorithm('xbr').with_preprocessing(False).with_postprocessing(False)
    assert forced.force_algorithm == 'xbr'
    assert not forced.enable_preprocessing
    assert not forced.enable_postprocessing
    assert base.force_algorithm is None


def test_pipeline_validates_config_on_construction():
    with pytest.raises(ValueError):
        UpscalePipeline(quiet_config(scale_factor=0.0))


# =============================================================================
# In-memory runs
# =============================================================================

def test_run_image_pixel_art(checker_image):
    context = UpscalePipeline(quiet_config(enable_preprocessing=False)).run_image(checker_image)
    assert context.algorithm == 'nearest'
    assert context.result.size == (32, 32)
    assert context.result == NearestNeighbor().upscale(checker_image, 2.0)


def test_stage_order_and_timings(checker_image):
    context = UpscalePipeline(quiet_config()).run_image(checker_image)
    assert list(context.timings) == [
        'validate', 'analyze', 'detect_issues', 'preprocess', 'upscale', 'postprocess'
    ]
    assert all(t >= 0.0 for t in context.timings.values())
    assert context.total_time >= 0.0


def test_disabled_stages_are_skipped(checker_image):
    config = quiet_config(enable_preprocessing=False, enable_postprocessing=False)
    context = UpscalePipeline(config).run_image(checker_image)
    assert 'preprocess' not in context.timings
    assert 'postprocess' not in context.timings


def test_forced_algorithm(checker_image):
    context = UpscalePipeline(quiet_config(force_algorithm='Bilinear', scale_factor=1.5)).run_image(checker_image)
    assert context.algorithm == 'bilinear'
    assert context.result.size == (24, 24)


def test_unknown_forced_algorithm(checker_image):
    pipeline = UpscalePipeline(quiet_config(force_algorithm='nonexistent'))
    with pytest.raises(PipelineError) as exc_info:
        pipeline.run_image(checker_image)
    assert exc_info.value.stage == 'upscale'
    assert isinstance(exc_info.value.__cause__, UnknownAlgorithm)


def test_size_limits(checker_image):
    pipeline = UpscalePipeline(quiet_config(max_size=8))
    with pytest.raises(PipelineError) as exc_info:
        pipeline.run_image(checker_image)
    assert exc_info.value.stage == 'validate'
    assert isinstance(exc_info.value.__cause__, ValidationError)


def test_context_serialization(checker_image):
    context = UpscalePipeline(quiet_config()).run_image(checker_image)
    data = context.to_dict()
    assert data['algorithm'] == 'nearest'
    assert data['output_size'] == [32, 32]
    assert data['profile']['content_type'] == 'PixelArt'


def test_verbose_run_prints_stages(capsys, checker_image):
    UpscalePipeline(PipelineConfig(verbose=True)).run_image(checker_image)
    out = capsys.readouterr().out
    assert '[analyze]' in out
    assert 'nearest' in out


# =============================================================================
# File runs
# =============================================================================

def test_file_run(tmp_path):
    src = tmp_path / "in.png"
    dst = tmp_path / "out" / "big.png"
    save_image(checker(size=8, block=2), src)

    context = UpscalePipeline(quiet_config(scale_factor=3.0)).run(src, dst)
    assert list(context.timings)[0] == 'load'
    assert list(context.timings)[-1] == 'save'
    assert load_image(dst).size == (24, 24)


def test_missing_input_fails_in_load_stage(tmp_path):
    dst = tmp_path / "never.png"
    with pytest.raises(PipelineError) as exc_info:
        UpscalePipeline(quiet_config()).run(tmp_path / "missing.png", dst)
    assert exc_info.value.stage == 'load'
    assert not dst.exists()


# =============================================================================
# Traditional mode
# =============================================================================

def test_process_traditional(random_image):
    out = process_traditional(random_image, 'nearest', 1.0)
    assert out == random_image


def test_process_traditional_default_algorithm(random_image):
    out = process_traditional(random_image, scale_factor=2.0)
    assert out.size == (14, 18)


def test_process_traditional_unknown(random_image):
    with pytest.raises(UnknownAlgorithm):
        process_traditional(random_image, 'warp-drive', 2.0)


@pytest.mark.parametrize("scale", [0.0, -1.0, 500.0])
def test_process_traditional_enforces_scale_bounds(random_image, scale):
    with pytest.raises(ValueError):
        process_traditional(random_image, 'nearest', scale)


# =============================================================================
# Mode comparison
# =============================================================================

@pytest.fixture
def checker_png(tmp_path):
    path = tmp_path / "in.png"
    save_image(checker(size=8, block=2), path)
    return path


def test_comparison_paths(tmp_path):
    paths = comparison_paths(tmp_path / "out" / "big.jpg")
    assert paths['traditional'] == tmp_path / "out" / "big_traditional.jpg"
    assert paths['pipeline'] == tmp_path / "out" / "big_pipeline.jpg"


def test_compare_modes_writes_both_outputs(tmp_path, checker_png):
    stats = compare_modes(checker_png, tmp_path / "big.png", 2.0, verbose=False)

    assert stats['algorithm'] == 'nearest'
    assert stats['content_type'] == 'PixelArt'
    for mode in ('traditional', 'pipeline'):
        result = stats['modes'][mode]
        assert result['error'] is None
        assert result['duration_s'] >= 0.0
        assert load_image(result['output_path']).size == (16, 16)
    assert (tmp_path / "big_traditional.png").exists()
    assert (tmp_path / "big_pipeline.png").exists()
    assert stats['overhead_pct'] is not None


def test_compare_modes_uses_forced_algorithm(tmp_path, checker_png):
    stats = compare_modes(checker_png, tmp_path / "big.png", 1.5, 'Bilinear', verbose=False)
    assert stats['algorithm'] == 'bilinear'
    assert load_image(tmp_path / "big_traditional.png").size == (12, 12)


def test_compare_modes_one_side_failed(tmp_path, checker_png, monkeypatch):
    def broken(*args, **kwargs):
        raise ValueError("direct path unavailable")

    monkeypatch.setattr(pipeline_module, 'process_traditional', broken)
    stats = compare_modes(checker_png, tmp_path / "big.png", 2.0, verbose=False)

    assert stats['modes']['traditional']['error'] == "direct path unavailable"
    assert stats['modes']['traditional']['duration_s'] is None
    assert stats['modes']['pipeline']['error'] is None
    assert stats['overhead_pct'] is None
    assert not (tmp_path / "big_traditional.png").exists()
    assert (tmp_path / "big_pipeline.png").exists()


def test_compare_modes_all_failed(tmp_path, checker_png):
    with pytest.raises(PipelineError) as exc_info:
        compare_modes(checker_png, tmp_path / "big.png", 2.0, 'warp-drive', verbose=False)
    assert exc_info.value.stage == 'compare'


def test_compare_modes_rejects_bad_scale(tmp_path, checker_png):
    with pytest.raises(ValueError):
        compare_modes(checker_png, tmp_path / "big.png", 500.0, verbose=False)
    assert not (tmp_path / "big_traditional.png").exists()


def test_compare_modes_verbose_summary(capsys, tmp_path, checker_png):
    compare_modes(checker_png, tmp_path / "big.png", 2.0)
    out = capsys.readouterr().out
    assert 'Comparison (nearest, 2x)' in out
    assert 'baseline' in out
    assert 'big_pipeline.png' in out
