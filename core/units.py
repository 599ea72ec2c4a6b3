"""
TempTerminal - Unit Conversion
Celsius/Fahrenheit conversion rounded to one decimal place.
"""

from __future__ import annotations

from typing import Optional


def celsius_to_fahrenheit(celsius: Optional[float]) -> Optional[float]:
    """Convert Celsius to Fahrenheit."""
    if celsius is None:
        return None
    return round((celsius * 9 / 5) + 32, 1)


def fahrenheit_to_celsius(fahrenheit: Optional[float]) -> Optional[float]:
    """Convert Fahrenheit to Celsius."""
    if fahrenheit is None:
        return None
    return round((fahrenheit - 32) * 5 / 9, 1)


def other_unit(unit: str) -> str:
    return "C" if unit == "F" else "F"


def convert(value: Optional[float], from_unit: str) -> Optional[float]:
    """Convert a value expressed in `from_unit` into the other unit."""
    if from_unit == "F":
        return fahrenheit_to_celsius(value)
    return celsius_to_fahrenheit(value)
