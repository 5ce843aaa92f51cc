"""
Nashville Housing - Core Package

This package contains the cleaning, deduplication and analytics pipeline
for the Nashville Housing property-sale dataset.
"""

__version__ = "0.1.0"
