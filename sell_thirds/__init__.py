"""Sell-in-thirds position tracker."""

__version__ = "0.1.0"
