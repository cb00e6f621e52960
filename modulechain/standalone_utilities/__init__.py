"""Utilities with no dependencies on the rest of the package."""
