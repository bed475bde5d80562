"""Seventeen-week fat loss challenge tracker."""

__version__ = "0.1.0"
