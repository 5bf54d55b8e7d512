"""Fetching detection snapshots from the detection-data service."""

from birbs.datasource.client import BirdFiles, DetectionDataClient

__all__ = ["BirdFiles", "DetectionDataClient"]
