import numpy as np
import pytest

from conftest import checker, uniform
from image_upscaling.core.analysis import (
    ContentProfile,
    ContentType,
    analyze_content,
    calculate_edge_sharpness,
    calculate_gradient_smoothness,
    calculate_noise_level,
    classify_content,
    count_unique_colors,
    detect_text_regions,
)
from image_upscaling.core.image import Image


# =============================================================================
# Examples
# =============================================================================

def test_checker_is_pixel_art(checker_image):
    profile = analyze_content(checker_image)
    assert profile.color_count < 10
    assert profile.edge_sharpness > 0.5
    assert profile.content_type == ContentType.PIXEL_ART
    assert profile.recommended_algorithm == 'nearest'


def test_ramp_is_smooth(ramp_image):
    profile = analyze_content(ramp_image)
    assert profile.gradient_smoothness > 0.5
    assert profile.edge_sharpness == 0.0


def test_classifier_is_deterministic(random_image, ramp_image):
    for img in (random_image, ramp_image):
        assert analyze_content(img) == analyze_content(img)


# =============================================================================
# Metrics
# =============================================================================

def test_unique_colors_counts_exactly():
    assert count_unique_colors(checker().array) == 2
    assert count_unique_colors(uniform(10, 10).array) == 1


def test_unique_colors_capped():
    rng = np.random.default_rng(7)
    data = rng.integers(0, 256, size=(100, 100, 3), dtype=np.uint8)
    assert count_unique_colors(data) == 4097


def test_unique_colors_sampled_on_large_images():
    # 200x200 -> every 4th pixel; columns of a 4-periodic stripe collapse to one
    data = np.zeros((200, 200, 3), dtype=np.uint8)
    data[:, 1::4] = 255
    assert count_unique_colors(data) == 1


def test_edge_sharpness_soft_edges():
    data = np.zeros((6, 6, 3), dtype=np.uint8)
    data[:, 3:] = 30
    # One vertical edge of mean difference 30: detected but not sharp
    assert calculate_edge_sharpness(data) == 0.0


def test_edge_sharpness_mixed():
    data = np.zeros((6, 8, 3), dtype=np.uint8)
    data[:, 3:] = 30
    data[:, 6:] = 200
    # Edges at x=2 (soft) and x=5 (sharp) on each of the 4 interior rows
    assert calculate_edge_sharpness(data) == pytest.approx(0.5)


@pytest.mark.parametrize("shape", [(1, 1), (2, 5), (5, 2)])
def test_tiny_images_have_zero_interior_metrics(shape):
    data = np.full(shape + (3,), 255, dtype=np.uint8)
    assert calculate_edge_sharpness(data) == 0.0
    assert calculate_noise_level(data) == 0.0
    assert calculate_gradient_smoothness(data) == 0.0


def test_gradient_smoothness_breaks_on_steps():
    data = np.zeros((8, 8, 3), dtype=np.uint8)
    data[:, 4:] = 200
    smooth = calculate_gradient_smoothness(data)
    assert 0.0 < smooth < 1.0


def test_text_regions_high_contrast_blocks():
    data = np.zeros((16, 16, 3), dtype=np.uint8)
    data[:8, :8, :] = 0
    data[2, 2] = 255
    assert detect_text_regions(data) == pytest.approx(0.25)


def test_text_regions_partial_blocks_count():
    data = np.zeros((10, 10, 3), dtype=np.uint8)
    data[9, 9] = 255
    # 2x2 blocks; only the bottom-right partial block has contrast
    assert detect_text_regions(data) == pytest.approx(0.25)


def test_noise_level_uniform_is_zero():
    assert calculate_noise_level(uniform(9, 9).array) == 0.0


def test_noise_level_single_spike():
    data = np.zeros((3, 3, 3), dtype=np.uint8)
    data[1, 1] = 255
    assert calculate_noise_level(data) == pytest.approx(1.0)


# =============================================================================
# Decision table
# =============================================================================

@pytest.mark.parametrize("colors,edge,grad,text,expected", [
    (10, 0.9, 0.0, 0.0, ContentType.PIXEL_ART),
    (10, 0.9, 0.0, 0.9, ContentType.PIXEL_ART),
    (300, 0.7, 0.0, 0.8, ContentType.TEXT),
    (300, 0.5, 0.0, 0.55, ContentType.SCREENSHOT),
    (300, 0.9, 0.0, 0.4, ContentType.SCREENSHOT),
    (5000, 0.1, 0.9, 0.0, ContentType.PHOTOGRAPHY),
    (5000, 0.1, 0.1, 0.0, ContentType.ARTWORK),
    (300, 0.1, 0.9, 0.0, ContentType.ARTWORK),
    (100, 0.1, 0.9, 0.0, ContentType.MIXED),
    (256, 0.1, 0.0, 0.0, ContentType.MIXED),
    (9000, 0.1, 0.1, 0.0, ContentType.MIXED),
])
def test_decision_table_order(colors, edge, grad, text, expected):
    assert classify_content(colors, edge, grad, text) == expected


@pytest.mark.parametrize("content_type,algorithm", [
    (ContentType.PIXEL_ART, 'nearest'),
    (ContentType.TEXT, 'nearest'),
    (ContentType.SCREENSHOT, 'bicubic'),
    (ContentType.PHOTOGRAPHY, 'lanczos3'),
    (ContentType.ARTWORK, 'lanczos3'),
    (ContentType.MIXED, 'bicubic'),
])
def test_recommendations(content_type, algorithm):
    assert content_type.recommended_algorithm == algorithm
    assert content_type.description


def test_profile_serialization(checker_image):
    profile = analyze_content(checker_image)
    data = profile.to_dict()
    assert data['content_type'] == 'PixelArt'
    assert data['recommended_algorithm'] == 'nearest'
    assert 'PixelArt' in profile.summary()


def test_profile_is_frozen():
    profile = ContentProfile(ContentType.MIXED, 1, 0.0, 0.0, 0.0, 0.0)
    with pytest.raises(AttributeError):
        profile.color_count = 5


def test_analysis_does_not_modify_image(random_image):
    before = random_image.to_array()
    analyze_content(random_image)
    assert random_image == Image.from_array(before)
