"""Bora wind statistics from hourly weather-station records."""

__version__ = "0.1.0"
