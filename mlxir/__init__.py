"""Offline processing of MLX90641 EEPROM and frame data, thermal image filters and settings text helpers."""

__version__ = "1.5.2"