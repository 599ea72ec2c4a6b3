import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.units import celsius_to_fahrenheit, convert, fahrenheit_to_celsius, other_unit
from core.models import TempPair


def test_known_conversions_round_to_one_decimal() -> None:
    assert celsius_to_fahrenheit(0) == 32.0
    assert celsius_to_fahrenheit(100) == 212.0
    assert celsius_to_fahrenheit(21.3) == 70.3
    assert fahrenheit_to_celsius(212) == 100.0
    assert fahrenheit_to_celsius(75) == 23.9
    assert fahrenheit_to_celsius(-40) == -40.0


def test_none_passes_through() -> None:
    assert celsius_to_fahrenheit(None) is None
    assert fahrenheit_to_celsius(None) is None
    assert convert(None, "C") is None


def test_round_trip_stays_within_rounding_tolerance() -> None:
    for tenths in range(-400, 501, 7):
        c = tenths / 10
        assert abs(fahrenheit_to_celsius(celsius_to_fahrenheit(c)) - c) <= 0.1 + 1e-9
    for tenths in range(-400, 1201, 7):
        f = tenths / 10
        assert abs(celsius_to_fahrenheit(fahrenheit_to_celsius(f)) - f) <= 0.1 + 1e-9


def test_convert_and_other_unit() -> None:
    assert other_unit("C") == "F"
    assert other_unit("F") == "C"
    assert convert(20.0, "C") == 68.0
    assert convert(68.0, "F") == 20.0


def test_temp_pair_derives_the_other_field() -> None:
    pair = TempPair.from_c(31.1)
    assert pair.temp_f == 88.0
    assert pair.in_unit("F") == 88.0

    pair = TempPair.from_unit(91.0, "F")
    assert pair.temp_c == 32.8
    assert pair.in_unit("C") == 32.8
