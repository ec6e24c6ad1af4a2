"""Kickstart: resumable bootstrap for new apps built from the template."""

__version__ = "0.1.0"
