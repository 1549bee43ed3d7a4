"""Utility modules for sorgen."""
