"""surveylens: survey table ingestion and statistical analysis engine."""

__version__ = "0.1.0"
