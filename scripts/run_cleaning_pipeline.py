"""
CLI wrapper for the Nashville Housing cleaning pipeline.

Usage:
    python scripts/run_cleaning_pipeline.py data/raw/nashville_housing.csv \
        --output data/processed/nashville_housing_clean.csv
"""
import sys
from pathlib import Path

# Add project root to path
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from src.nashville_housing.pipelines.cleaning import main

if __name__ == "__main__":
    sys.exit(main())
