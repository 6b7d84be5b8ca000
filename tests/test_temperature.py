"""
Tests for temperature units, Temp and TempRange.
"""
import numpy as np
import pytest

from thermal_capture.temperature import Temp, TemperatureUnit, TempRange


@pytest.mark.parametrize("unit", list(TemperatureUnit))
@pytest.mark.parametrize("kelvin", [0.0, 1.5, 233.15, 273.15, 300.0, 373.15, 1273.0])
def test_unit_round_trip(unit, kelvin):
    """to_kelvin(from_kelvin(k)) gives k back for every unit."""
    assert unit.to_kelvin(unit.from_kelvin(kelvin)) == pytest.approx(kelvin, abs=1e-4)


def test_unit_fixed_points():
    """Freezing and boiling points convert exactly."""
    assert TemperatureUnit.CELSIUS.from_kelvin(273.15) == pytest.approx(0.0)
    assert TemperatureUnit.FAHRENHEIT.from_kelvin(273.15) == pytest.approx(32.0)
    assert TemperatureUnit.FAHRENHEIT.from_kelvin(373.15) == pytest.approx(212.0)
    assert TemperatureUnit.KELVIN.from_kelvin(300.0) == 300.0


def test_unit_converts_arrays():
    """Conversions work element-wise on numpy arrays."""
    out = TemperatureUnit.CELSIUS.from_kelvin(np.array([273.15, 373.15]))
    np.testing.assert_allclose(out, [0.0, 100.0])


def test_unit_suffix_and_name():
    assert TemperatureUnit.KELVIN.suffix == "K"
    assert TemperatureUnit.CELSIUS.suffix == "°C"
    assert TemperatureUnit.FAHRENHEIT.suffix == "°F"
    assert str(TemperatureUnit.CELSIUS) == "Celsius"
    assert TemperatureUnit.default() is TemperatureUnit.KELVIN


@pytest.mark.parametrize(
    "text, unit",
    [("C", TemperatureUnit.CELSIUS), ("fahrenheit", TemperatureUnit.FAHRENHEIT), (" k ", TemperatureUnit.KELVIN)],
)
def test_unit_parse(text, unit):
    assert TemperatureUnit.parse(text) is unit


def test_unit_parse_unknown():
    with pytest.raises(ValueError, match="Unknown temperature unit"):
        TemperatureUnit.parse("R")


def test_temp_from_unit_and_format():
    """Temp stores Kelvin and formats in any unit."""
    t = Temp.from_celsius(36.6)
    assert t.kelvin == pytest.approx(309.75)
    assert t.celsius == pytest.approx(36.6)
    assert t.format(TemperatureUnit.CELSIUS) == "36.6°C"
    assert Temp(300.0) < Temp(301.0)


def test_range_rejects_inverted_bounds():
    with pytest.raises(ValueError, match="Invalid temperature range"):
        TempRange(Temp(10.0), Temp(5.0))


def test_range_factor():
    """factor maps low to 0, high to 1 and the midpoint to 0.5."""
    r = TempRange(Temp(273.15), Temp(373.15))
    assert r.factor(Temp(273.15)) == pytest.approx(0.0)
    assert r.factor(Temp(373.15)) == pytest.approx(1.0)
    assert r.factor(Temp(323.15)) == pytest.approx(0.5)
    assert r.factor(Temp(423.15)) == pytest.approx(1.5)


def test_range_factor_array():
    r = TempRange.from_kelvin(0.0, 10.0)
    np.testing.assert_allclose(r.factor(np.array([0.0, 5.0, 10.0])), [0.0, 0.5, 1.0])


def test_degenerate_range_factor_is_zero():
    """A zero-width range maps every temperature to 0.0."""
    r = TempRange.from_kelvin(300.0, 300.0)
    assert r.is_degenerate()
    assert r.factor(Temp(300.0)) == 0.0
    assert r.factor(Temp(500.0)) == 0.0
    np.testing.assert_array_equal(r.factor(np.array([[1.0, 300.0]])), [[0.0, 0.0]])


def test_range_join():
    """join covers both ranges and is commutative, associative and idempotent."""
    a = TempRange.from_kelvin(0.0, 10.0)
    b = TempRange.from_kelvin(5.0, 20.0)
    c = TempRange.from_kelvin(-3.0, 4.0)
    assert a.join(b) == TempRange.from_kelvin(0.0, 20.0)
    assert a.join(b) == b.join(a)
    assert a.join(b).join(c) == a.join(b.join(c))
    assert a.join(a) == a


def test_range_contains_and_width():
    r = TempRange.from_unit(TemperatureUnit.CELSIUS, 0.0, 100.0)
    assert r.width == pytest.approx(100.0)
    assert r.contains(Temp.from_celsius(50.0))
    assert not r.contains(Temp.from_celsius(-1.0))
    low, high = r.to_unit(TemperatureUnit.FAHRENHEIT)
    assert (low, high) == (pytest.approx(32.0), pytest.approx(212.0))
