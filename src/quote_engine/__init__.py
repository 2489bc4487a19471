"""Mobile vehicle-service quote engine."""

__version__ = "0.1.0"
