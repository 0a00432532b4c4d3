"""Workforce analytics engine for hotel staffing dashboards."""

__version__ = "1.0.0"
