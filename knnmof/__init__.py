"""Daily-to-hourly rainfall disaggregation by kNN method of fragments."""

__version__ = "0.1.0"
__all__ = ["models", "dataio", "classify", "disaggregate", "cli"]