"""
HTTP API for the price list and tire search.
"""
