"""
Record Deduplication Pipeline

Removes repeated sale records. Two records are duplicates when they share
ParcelID, PropertyAddress, SaleDate and LegalReference; the record with the
highest UniqueID is kept.
"""
from typing import List, Optional

import pandas as pd

from src.nashville_housing.models.housing_record import DEDUP_KEY, UNIQUE_ID
from src.nashville_housing.utils.logger import get_logger

logger = get_logger(__name__)

ROW_NUMBER = "RowNumber"


class RecordDeduplicator:
    """
    Deduplicates housing records by their sale identity.

    Missing values inside the key compare equal to each other, so two
    records that both lack a PropertyAddress can still be duplicates.
    """

    def __init__(self, key: Optional[List[str]] = None):
        """Initialize deduplicator with the duplicate key columns."""
        self.key = list(key) if key else list(DEDUP_KEY)
        self.removed = 0
        logger.info("record_deduplicator_initialized", key=self.key)

    def find_duplicates(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Number the records inside each duplicate group.

        RowNumber 1 marks the highest UniqueID of its group; every row
        with RowNumber > 1 would be removed by ``deduplicate``.

        Args:
            df: Housing records

        Returns:
            Copy of the records with a RowNumber column, in input order
        """
        ranked = df.sort_values(UNIQUE_ID, ascending=False, kind="mergesort")
        row_numbers = ranked.groupby(self.key, dropna=False, sort=False).cumcount() + 1

        result = df.copy()
        result[ROW_NUMBER] = row_numbers.reindex(df.index).astype("int64")
        return result

    def deduplicate(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Keep one record per duplicate group, the one with the max UniqueID.

        Args:
            df: Housing records

        Returns:
            Deduplicated records in their original relative order
        """
        if df.empty:
            self.removed = 0
            return df.copy()

        numbered = self.find_duplicates(df)
        keep = numbered[ROW_NUMBER] == 1
        result = df.loc[keep].reset_index(drop=True)

        self.removed = int((~keep).sum())
        logger.info(
            "dedup_complete",
            input_rows=len(df),
            output_rows=len(result),
            removed=self.removed,
        )
        return result

    def duplicate_groups(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Summarize groups that contain more than one record.

        Returns:
            One row per duplicate group with its key, size and kept UniqueID
        """
        if df.empty:
            return pd.DataFrame(columns=self.key + ["Count", "KeptUniqueID"])

        grouped = (
            df.groupby(self.key, dropna=False, sort=True)[UNIQUE_ID]
            .agg(Count="count", KeptUniqueID="max")
            .reset_index()
        )
        groups = grouped[grouped["Count"] > 1].reset_index(drop=True)

        logger.info("duplicate_groups_found", total_records=len(df), duplicate_groups=len(groups))
        return groups
