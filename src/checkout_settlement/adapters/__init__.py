"""Boundary adapters for request documents."""
