"""
TempTerminal - Error Taxonomy

Only UnknownCityError and InvalidDayOffsetError leave the aggregation core.
Provider errors are raised inside adapters and absorbed by collector.guarded_fetch.
"""

from __future__ import annotations


class TempTerminalError(Exception):
    """Base class for all TempTerminal errors."""


class UnknownCityError(TempTerminalError, LookupError):
    def __init__(self, city: str):
        super().__init__(f"Unknown city: {city}")
        self.city = city


class InvalidDayOffsetError(TempTerminalError, ValueError):
    def __init__(self, day_offset: int):
        super().__init__(f"Day offset must be 0, 1 or 2 (got {day_offset})")
        self.day_offset = day_offset


class ProviderError(TempTerminalError):
    """A single provider adapter failed; the request carries on without it."""

    def __init__(self, provider: str, message: str):
        super().__init__(f"[{provider}] {message}")
        self.provider = provider


class ProviderTimeoutError(ProviderError):
    pass


class ProviderTransportError(ProviderError):
    pass


class ProviderParseError(ProviderError):
    pass
