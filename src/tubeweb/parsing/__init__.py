"""Extraction and entity building for upstream JSON responses."""
