"""Validation of generated and supplied entity data."""
