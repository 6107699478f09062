"""Packaged sample data for tirehub."""
