"""
Tests for ThermalData, ThermalDataHistogram and gradients.
"""
import numpy as np
import pytest

from thermal_capture.gradients import THERMAL_GRADIENTS, ThermalGradient, get_gradient, gradient_names
from thermal_capture.temperature import Temp, TempRange
from thermal_capture.thermal_data import ThermalData, ThermalDataHistogram


@pytest.fixture
def data():
    return ThermalData(np.array([[300.0, 310.0, 305.0], [290.0, 320.0, 300.0]]))


def test_shape_and_temperature_at(data):
    assert (data.width, data.height) == (3, 2)
    assert data.get_image_shape() == (2, 3)
    assert data.temperature_at(1, 1) == Temp(320.0)
    with pytest.raises(IndexError, match="out of image bounds"):
        data.temperature_at(3, 0)


def test_rejects_non_2d():
    with pytest.raises(ValueError, match="non-empty 2-D"):
        ThermalData(np.zeros(5))


def test_min_max_pos(data):
    """Positions are (x, y) of the coldest and hottest pixels."""
    assert data.get_min_max_pos() == ((0, 1), (1, 1))
    assert data.captured_range() == TempRange.from_kelvin(290.0, 320.0)


def test_map_to_image_uses_gradient(data):
    """Coldest pixel gets the gradient start, hottest the gradient end."""
    gradient = get_gradient("White Hot")
    image = data.map_to_image(data.captured_range(), gradient)
    assert image.shape == (2, 3, 3)
    assert image.dtype == np.uint8
    assert tuple(image[1, 0]) == gradient.get_color(0.0)
    assert tuple(image[1, 1]) == gradient.get_color(1.0)


def test_map_to_image_clips_outside_range(data):
    """Pixels outside the mapping range get the end colors."""
    gradient = THERMAL_GRADIENTS[0]
    image = data.map_to_image(TempRange.from_kelvin(300.0, 305.0), gradient)
    assert tuple(image[1, 0]) == gradient.get_color(0.0)
    assert tuple(image[1, 1]) == gradient.get_color(1.0)


def test_histogram_counts_every_pixel(data):
    """With the captured range, bucket counts add up to the pixel count."""
    histogram = ThermalDataHistogram.from_thermal_data(data, data.captured_range(), 100)
    assert len(histogram) == 100
    assert histogram.total == data.pixel_count
    assert histogram.counts[0] == 1
    assert histogram.counts[-1] == 1


def test_histogram_bucket_ranges(data):
    histogram = ThermalDataHistogram.from_thermal_data(data, TempRange.from_kelvin(280.0, 330.0), 5)
    assert [b.range.low.kelvin for b in histogram] == pytest.approx([280.0, 290.0, 300.0, 310.0, 320.0])
    assert histogram.counts == [0, 1, 3, 1, 1]
    assert histogram.max_count == 3


def test_histogram_ignores_pixels_outside_range(data):
    histogram = ThermalDataHistogram.from_thermal_data(data, TempRange.from_kelvin(300.0, 310.0), 2)
    assert histogram.total == 4


def test_histogram_degenerate_range():
    """A uniform frame over a zero-width range lands in the first bucket."""
    flat = ThermalData(np.full((3, 3), 295.0))
    histogram = ThermalDataHistogram.from_thermal_data(flat, flat.captured_range(), 10)
    assert histogram.counts[0] == 9
    assert histogram.total == 9


def test_histogram_bucket_count_validation(data):
    with pytest.raises(ValueError, match="bucket_count"):
        ThermalDataHistogram.from_thermal_data(data, data.captured_range(), 0)


def test_gradient_lookup():
    assert THERMAL_GRADIENTS[0].name == "Iron"
    assert get_gradient("iron") is THERMAL_GRADIENTS[0]
    assert "Jet" in gradient_names()
    with pytest.raises(ValueError, match="Unknown gradient"):
        get_gradient("rainbow-unicorn")


def test_gradient_colors():
    """Gray maps 0 to black and 1 to white; factors outside [0, 1] are clipped."""
    gray = ThermalGradient("Gray", "gray")
    assert gray.get_color(0.0) == (0, 0, 0)
    assert gray.get_color(1.0) == (255, 255, 255)
    assert gray(-4.0) == (0, 0, 0)
    assert gray(7.0) == (255, 255, 255)
    mapped = gray.map(np.array([[0.0, 1.0]]))
    assert mapped.shape == (1, 2, 3)


def test_gradient_equality_includes_colormap():
    """Two gradients with the same name but different colors are not equal."""
    assert ThermalGradient("Custom", "gray") == ThermalGradient("Custom", "gray")
    assert ThermalGradient("Custom", "gray") != ThermalGradient("Custom", "jet")
    assert get_gradient("Jet") != ThermalGradient("Jet", "gray")
