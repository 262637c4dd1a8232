"""Validation and summary statistics for aerial survey hotspot records."""
