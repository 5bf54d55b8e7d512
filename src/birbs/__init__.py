"""Birbs: reshapes bird detection snapshots into dashboard-ready views."""

__version__ = "0.1.0"
