"""Unit conversion helpers shared by the metric modules.

Conversions are exact; rounding happens only in the display helpers at the
bottom of the module.
Unit tags are validated by the request schemas, so an unknown tag here is a
programming error and surfaces as ``KeyError``.
"""

from __future__ import annotations

import math
from typing import Literal

MassUnit = Literal["kg", "lbs"]
HeightUnit = Literal["cm", "ft", "in"]
LengthUnit = Literal["cm", "in"]
VolumeUnit = Literal["ml", "l", "cup", "fl oz"]

KG_PER_LB = 0.453592
LBS_PER_KG = 2.20462

CM_PER_FT = 30.48
CM_PER_IN = 2.54

_ML_PER_UNIT: dict[str, float] = {
    "ml": 1.0,
    "l": 1000.0,
    "cup": 236.588,
    "fl oz": 29.5735,
}

_CM_PER_HEIGHT_UNIT: dict[str, float] = {
    "cm": 1.0,
    "ft": CM_PER_FT,
    "in": CM_PER_IN,
}


def to_kg(value: float, unit: str) -> float:
    if unit == "lbs":
        return value * KG_PER_LB
    return value


def from_kg(value_kg: float, unit: str) -> float:
    if unit == "lbs":
        return value_kg * LBS_PER_KG
    return value_kg


def convert_mass(value: float, from_unit: str, to_unit: str) -> float:
    if from_unit == to_unit:
        return value
    if from_unit == "kg" and to_unit == "lbs":
        return value * LBS_PER_KG
    if from_unit == "lbs" and to_unit == "kg":
        return value * KG_PER_LB
    raise KeyError(f"{from_unit}->{to_unit}")


def height_to_cm(value: float, unit: str) -> float:
    return value * _CM_PER_HEIGHT_UNIT[unit]


def height_to_m(value: float, unit: str) -> float:
    return height_to_cm(value, unit) / 100


def cm_to_in(value: float) -> float:
    return value / CM_PER_IN


def in_to_cm(value: float) -> float:
    return value * CM_PER_IN


def length_to_cm(value: float, unit: str) -> float:
    if unit == "in":
        return in_to_cm(value)
    return value


def volume_to_ml(value: float, unit: str) -> float:
    return value * _ML_PER_UNIT[unit]


def ml_to(value_ml: float, unit: str) -> float:
    return value_ml / _ML_PER_UNIT[unit]


def round_half_up(x: float) -> int:
    # halves round towards +inf (2.5 -> 3, -2.5 -> -2), unlike round()
    return math.floor(x + 0.5)


def round1(x: float) -> float:
    return math.floor(x * 10 + 0.5) / 10
