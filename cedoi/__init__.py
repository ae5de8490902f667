"""CEDOI Madurai Forum attendance tracker."""

__version__ = "1.0.0"
