"""
Catalog core: scoped, hashed bearer tokens and safe paginated catalog search.
"""

__version__ = "0.1.0"
