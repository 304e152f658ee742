"""Notebook fan control building blocks: lenient JSON, option parsing, configuration, temperature filtering and threshold selection."""

__version__ = "0.3.15"