"""Worked examples of service patterns: APIs, configuration, errors and concurrency."""

__version__ = "0.1.0"