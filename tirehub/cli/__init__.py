"""
Command-line interface for tirehub.
"""
