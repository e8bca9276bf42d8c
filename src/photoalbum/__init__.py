"""
PHOTOALBUM - concurrent, order-preserving photo album builder.
"""

__version__ = "1.0.0"
