"""Shuttle driver directory and distance calculator API."""
