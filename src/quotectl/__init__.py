"""quotectl: pricing calculations for service quotes."""

__version__ = "0.1.0"
