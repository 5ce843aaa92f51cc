"""
Field Normalization Transformer

Fills missing property addresses from other records of the same parcel,
normalizes SoldAsVacant, trims addresses, adds a display-only sale date and
drops columns that are not kept after cleaning.
"""
from typing import Dict, List, Optional

import pandas as pd

from config.settings import settings
from src.nashville_housing.models.housing_record import (
    PARCEL_ID,
    PROPERTY_ADDRESS,
    SALE_DATE,
    SALE_DATE_TEXT,
    SOLD_AS_VACANT,
    UNIQUE_ID,
)
from src.nashville_housing.utils.logger import get_logger

logger = get_logger(__name__)

VACANCY_VALUES = {
    "No": "False",
    "Yes": "True",
    # already normalized
    "False": "False",
    "True": "True",
}
UNKNOWN_VACANCY = "Unknown"


def normalize_vacancy(value) -> str:
    """Map a raw SoldAsVacant value to "True", "False" or "Unknown"."""
    if not isinstance(value, str):
        return UNKNOWN_VACANCY
    return VACANCY_VALUES.get(value, UNKNOWN_VACANCY)


def missing_address(series: pd.Series) -> pd.Series:
    """Null or blank addresses."""
    blank = series.astype("string").str.strip().eq("").fillna(False).astype(bool)
    return series.isna() | blank


class FieldNormalizer:
    """
    Normalizes housing record fields.

    Every method returns a new DataFrame and leaves its input untouched.
    Counters from the last run are kept in ``stats``.
    """

    def __init__(
        self,
        date_format: Optional[str] = None,
        dropped_columns: Optional[List[str]] = None,
    ):
        self.date_format = date_format or settings.display_date_format
        self.dropped_columns = (
            list(dropped_columns) if dropped_columns is not None else list(settings.dropped_columns)
        )
        self.stats: Dict[str, int] = {}
        logger.info("field_normalizer_initialized", dropped_columns=self.dropped_columns)

    def normalize(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Run every normalization step in order.

        Args:
            df: Prepared housing records

        Returns:
            Normalized copy of the records
        """
        self.stats = {}
        df = self.backfill_property_address(df)
        df = self.trim_property_address(df)
        df = self.normalize_sold_as_vacant(df)
        df = self.add_sale_date_text(df)
        df = self.drop_unused_columns(df)

        logger.info("normalization_complete", rows=len(df), **self.stats)
        return df

    def backfill_property_address(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Fill missing PropertyAddress values from rows with the same ParcelID.

        Candidates are the other rows of the parcel whose address was present
        before this pass. The lowest-UniqueID candidate wins; parcels whose
        candidates disagree are logged as ambiguous.
        """
        df = df.copy()
        missing = missing_address(df[PROPERTY_ADDRESS])

        self.stats["addresses_backfilled"] = 0
        self.stats["ambiguous_backfills"] = 0
        if not missing.any():
            return df

        donors = (
            df.loc[~missing & df[PARCEL_ID].notna(), [PARCEL_ID, UNIQUE_ID, PROPERTY_ADDRESS]]
            .sort_values(UNIQUE_ID, kind="mergesort")
        )
        if donors.empty:
            logger.info("address_backfill_skipped", missing=int(missing.sum()))
            return df

        # Parcels offering more than one distinct address
        distinct = donors.groupby(PARCEL_ID)[PROPERTY_ADDRESS].agg(
            lambda values: values.str.strip().nunique()
        )
        ambiguous_parcels = set(distinct[distinct > 1].index)

        first_address = donors.drop_duplicates(subset=PARCEL_ID, keep="first").set_index(PARCEL_ID)[
            PROPERTY_ADDRESS
        ]

        fills = df.loc[missing, PARCEL_ID].map(first_address)
        filled = fills.notna()
        df.loc[fills.index[filled], PROPERTY_ADDRESS] = fills[filled]

        for parcel_id in sorted(set(df.loc[fills.index[filled], PARCEL_ID]) & ambiguous_parcels):
            candidates = donors.loc[donors[PARCEL_ID] == parcel_id]
            logger.warning(
                "ambiguous_backfill",
                parcel_id=parcel_id,
                candidates=candidates[PROPERTY_ADDRESS].str.strip().unique().tolist(),
                chosen_unique_id=int(candidates[UNIQUE_ID].iloc[0]),
            )
            self.stats["ambiguous_backfills"] += 1

        self.stats["addresses_backfilled"] = int(filled.sum())
        logger.info(
            "address_backfill_complete",
            missing=int(missing.sum()),
            backfilled=self.stats["addresses_backfilled"],
            ambiguous=self.stats["ambiguous_backfills"],
        )
        return df

    def trim_property_address(self, df: pd.DataFrame) -> pd.DataFrame:
        """Strip leading/trailing whitespace from PropertyAddress; blank becomes null."""
        df = df.copy()
        df[PROPERTY_ADDRESS] = df[PROPERTY_ADDRESS].map(
            lambda v: (v.strip() or None) if isinstance(v, str) else v
        )
        return df

    def normalize_sold_as_vacant(self, df: pd.DataFrame) -> pd.DataFrame:
        """Map SoldAsVacant to "True"/"False"/"Unknown"."""
        df = df.copy()
        if SOLD_AS_VACANT not in df.columns:
            df[SOLD_AS_VACANT] = UNKNOWN_VACANCY
        else:
            df[SOLD_AS_VACANT] = df[SOLD_AS_VACANT].map(normalize_vacancy).astype("object")

        self.stats["vacancy_unknown"] = int((df[SOLD_AS_VACANT] == UNKNOWN_VACANCY).sum())
        return df

    def add_sale_date_text(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Add SaleDateText, the sale date formatted for display.

        SaleDate itself is not modified.
        """
        df = df.copy()
        sale_dates = pd.to_datetime(df[SALE_DATE], errors="coerce")
        df[SALE_DATE_TEXT] = sale_dates.dt.strftime(self.date_format).astype("object")
        df.loc[sale_dates.isna(), SALE_DATE_TEXT] = None
        return df

    def drop_unused_columns(self, df: pd.DataFrame) -> pd.DataFrame:
        """Remove columns not retained after cleaning (OwnerAddress, TaxDistrict)."""
        present = [column for column in self.dropped_columns if column in df.columns]
        if present:
            logger.info("columns_dropped", columns=present)
        return df.drop(columns=present)
