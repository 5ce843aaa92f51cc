"""
Nashville Housing Data Cleaning

Normalizes, parses, deduplicates and summarizes Nashville property-sale records.
"""

__version__ = "0.1.0"
