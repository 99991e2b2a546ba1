"""Fair meeting point recommendations for two people on a transit network."""

__version__ = "0.1.0"
