"""
ETL Package

Reading the raw housing dataset and persisting pipeline outputs.
"""
from src.nashville_housing.etl.loaders import HousingLoader
from src.nashville_housing.etl.writers import HousingWriter

__all__ = [
    "HousingLoader",
    "HousingWriter",
]
