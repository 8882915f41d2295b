"""Feedback Collector: public feedback intake with per-admin dashboards."""

__version__ = "1.0.0"
