"""
Helpers for computing basic data-quality metrics on raw housing records.
"""
from __future__ import annotations

from typing import Dict, Optional

import pandas as pd

from src.nashville_housing.models.housing_record import (
    BEDROOMS,
    BUILDING_VALUE,
    FULL_BATH,
    LAND_VALUE,
    OWNER_ADDRESS,
    OWNER_NAME,
    PARCEL_ID,
    PROPERTY_ADDRESS,
    TOTAL_VALUE,
)
from src.nashville_housing.transformers.field_normalizer import missing_address

VALUE_MAXIMA = {
    "MaxTotalValue": TOTAL_VALUE,
    "MaxLandValue": LAND_VALUE,
    "MaxBuildingValue": BUILDING_VALUE,
    "MaxBedrooms": BEDROOMS,
    "MaxFullBaths": FULL_BATH,
}


def parcels_with_multiple_owners(df: pd.DataFrame) -> pd.DataFrame:
    """Return ParcelID and OwnerCount for parcels with more than one owner record."""
    if OWNER_NAME not in df.columns or df.empty:
        return pd.DataFrame(columns=[PARCEL_ID, "OwnerCount"])

    counts = df.groupby(PARCEL_ID)[OWNER_NAME].count()
    counts = counts[counts > 1]
    return counts.rename("OwnerCount").reset_index()


def _recoverable_rows(df: pd.DataFrame, column: str) -> pd.DataFrame:
    """Rows with a null or blank ``column`` whose parcel has it on another row."""
    if column not in df.columns or df.empty:
        return df.iloc[0:0]

    present = ~missing_address(df[column])
    parcel_has_value = present.groupby(df[PARCEL_ID]).transform("max").fillna(False).astype(bool)
    return df.loc[~present & parcel_has_value]


def parcels_missing_address(df: pd.DataFrame) -> pd.DataFrame:
    """Rows without a PropertyAddress whose parcel has one elsewhere."""
    return _recoverable_rows(df, PROPERTY_ADDRESS)


def parcels_missing_owner_address(df: pd.DataFrame) -> pd.DataFrame:
    """Rows without an OwnerAddress whose parcel has one elsewhere."""
    return _recoverable_rows(df, OWNER_ADDRESS)


def value_maxima(df: pd.DataFrame) -> Dict[str, Optional[float]]:
    """Maximum values of the valuation and room columns, for outlier checks."""
    maxima: Dict[str, Optional[float]] = {}
    for label, column in VALUE_MAXIMA.items():
        if column in df.columns and df[column].notna().any():
            maxima[label] = float(df[column].max())
        else:
            maxima[label] = None
    return maxima


def build_quality_report(df: pd.DataFrame) -> Dict[str, object]:
    """Return counts describing the raw dataset's known quality issues."""
    return {
        "rows": len(df),
        "missing_property_address": int(missing_address(df[PROPERTY_ADDRESS]).sum()) if PROPERTY_ADDRESS in df.columns else 0,
        "recoverable_property_address": len(parcels_missing_address(df)),
        "recoverable_owner_address": len(parcels_missing_owner_address(df)),
        "parcels_with_multiple_owners": len(parcels_with_multiple_owners(df)),
        "value_maxima": value_maxima(df),
    }
