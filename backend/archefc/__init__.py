"""
Arche FC club backend.
"""

__version__ = "1.0.0"
