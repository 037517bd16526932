"""Renewable-energy transition planning from monthly electricity consumption."""

__version__ = "0.1.0"
