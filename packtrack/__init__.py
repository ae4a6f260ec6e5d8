"""packtrack: CSV order-packing tracker."""

__version__ = "0.1.0"
