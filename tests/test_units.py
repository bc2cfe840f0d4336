from __future__ import annotations

import pytest

from fittrack.units import (
    convert_mass,
    cm_to_in,
    from_kg,
    height_to_cm,
    height_to_m,
    length_to_cm,
    ml_to,
    round1,
    round_half_up,
    to_kg,
    volume_to_ml,
)


def test_mass_conversions() -> None:
    assert to_kg(100, "lbs") == pytest.approx(45.3592)
    assert to_kg(80, "kg") == 80
    assert from_kg(1, "lbs") == pytest.approx(2.20462)
    assert convert_mass(10, "kg", "kg") == 10
    assert convert_mass(10, "kg", "lbs") == pytest.approx(22.0462)


def test_convert_mass_rejects_unknown_unit() -> None:
    with pytest.raises(KeyError):
        convert_mass(1, "kg", "stone")


def test_height_and_length() -> None:
    assert height_to_cm(6, "ft") == pytest.approx(182.88)
    assert height_to_cm(70, "in") == pytest.approx(177.8)
    assert height_to_m(180, "cm") == pytest.approx(1.8)
    assert cm_to_in(2.54) == pytest.approx(1.0)
    assert length_to_cm(10, "in") == pytest.approx(25.4)
    assert length_to_cm(10, "cm") == 10


def test_volume() -> None:
    assert volume_to_ml(2, "cup") == pytest.approx(473.176)
    assert volume_to_ml(1.5, "l") == 1500
    assert volume_to_ml(8, "fl oz") == pytest.approx(236.588)
    assert ml_to(1000, "l") == 1


def test_rounding_goes_half_up() -> None:
    assert round_half_up(2.5) == 3
    assert round_half_up(-2.5) == -2
    assert round_half_up(2.49) == 2
    assert round1(27.77) == 27.8
    assert round1(27.75) == 27.8
