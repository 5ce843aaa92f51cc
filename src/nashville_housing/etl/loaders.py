"""
ETL Loaders

Read the raw Nashville Housing dataset from a file, a database table or
in-memory rows into a uniformly typed pandas DataFrame.
"""
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import pandas as pd
from pydantic import ValidationError
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from config.settings import settings
from src.nashville_housing.exceptions import LoadError
from src.nashville_housing.models.housing_record import (
    HousingRecord,
    NON_NEGATIVE_COLUMNS,
    NUMERIC_COLUMNS,
    PARCEL_ID,
    REQUIRED_COLUMNS,
    SALE_DATE,
    UNIQUE_ID,
    parse_currency,
)
from src.nashville_housing.utils.logger import get_logger

logger = get_logger(__name__)

Source = Union[str, Path]


def is_database_url(source: Any) -> bool:
    """Return True when the source looks like a SQLAlchemy URL."""
    return isinstance(source, str) and "://" in source


class HousingLoader:
    """
    Load raw housing records into a DataFrame.

    Supported sources: CSV, Excel (.xlsx/.xls), Parquet, a SQL table reached
    through a SQLAlchemy URL, or a list of row dicts.
    """

    FILE_READERS = {
        ".csv": "_read_csv",
        ".xlsx": "_read_excel",
        ".xls": "_read_excel",
        ".parquet": "_read_parquet",
    }

    def __init__(self, engine: Optional[Engine] = None):
        self.engine = engine
        logger.info("housing_loader_initialized")

    def load(self, source: Source, table: Optional[str] = None) -> pd.DataFrame:
        """
        Load a dataset from a file path or database URL.

        Args:
            source: File path or SQLAlchemy database URL
            table: Source table name for database URLs

        Returns:
            DataFrame with canonical column names and types

        Raises:
            LoadError: If the source cannot be read into records
        """
        if is_database_url(source):
            return self.load_sql(source, table=table)

        path = Path(source)
        reader_name = self.FILE_READERS.get(path.suffix.lower())
        if reader_name is None:
            raise LoadError(path, f"unsupported file type '{path.suffix}'")
        if not path.exists():
            raise LoadError(path, "file not found")

        try:
            df = getattr(self, reader_name)(path)
        except (OSError, ValueError, pd.errors.ParserError) as exc:
            # EmptyDataError is a ValueError subclass
            raise LoadError(path, str(exc)) from exc

        logger.info("raw_dataset_read", source=str(path), rows=len(df), columns=len(df.columns))
        return self.prepare(df, source=path)

    def load_sql(self, database_url: str, table: Optional[str] = None) -> pd.DataFrame:
        """
        Load the source table from a database.

        Args:
            database_url: SQLAlchemy database URL
            table: Table name (defaults to settings.source_table)

        Returns:
            Prepared DataFrame
        """
        table = table or settings.source_table
        try:
            engine = self.engine or create_engine(database_url, pool_pre_ping=True)
            df = pd.read_sql_table(table, engine)
        except (SQLAlchemyError, ValueError) as exc:
            raise LoadError(f"{database_url}#{table}", str(exc)) from exc

        logger.info("raw_table_read", table=table, rows=len(df), columns=len(df.columns))
        return self.prepare(df, source=table)

    def load_records(self, records: Iterable[Dict[str, Any]]) -> pd.DataFrame:
        """
        Validate in-memory rows through HousingRecord and build a DataFrame.

        Args:
            records: Row dicts keyed by dataset column names

        Returns:
            Prepared DataFrame
        """
        validated: List[dict] = []
        for index, row in enumerate(records):
            try:
                validated.append(HousingRecord.model_validate(row).to_dict())
            except ValidationError as exc:
                raise LoadError("records", f"row {index} is invalid: {exc}") from exc

        if not validated:
            df = pd.DataFrame(columns=[field.alias for field in HousingRecord.model_fields.values()])
        else:
            df = pd.DataFrame(validated)
        return self.prepare(df, source="records")

    @staticmethod
    def _read_csv(path: Path) -> pd.DataFrame:
        return pd.read_csv(path, dtype=str)

    @staticmethod
    def _read_excel(path: Path) -> pd.DataFrame:
        return pd.read_excel(path, dtype=str, engine="openpyxl")

    @staticmethod
    def _read_parquet(path: Path) -> pd.DataFrame:
        return pd.read_parquet(path)

    def prepare(self, df: pd.DataFrame, source: Any) -> pd.DataFrame:
        """
        Canonicalize column names and coerce column types.

        The published dataset spells the key column "UniqueID " with a
        trailing space, so header whitespace is stripped. Negative prices,
        values and room counts become null.

        Raises:
            LoadError: On missing required columns or bad UniqueIDs
        """
        df = df.copy()
        df.columns = [str(column).strip() for column in df.columns]

        missing = [column for column in REQUIRED_COLUMNS if column not in df.columns]
        if missing:
            raise LoadError(source, f"missing required columns: {', '.join(missing)}")

        unique_ids = pd.to_numeric(df[UNIQUE_ID], errors="coerce")
        if unique_ids.isna().any() or (unique_ids % 1 != 0).any():
            bad = df.loc[unique_ids.isna() | (unique_ids % 1 != 0), UNIQUE_ID].head(5).tolist()
            raise LoadError(source, f"non-integer UniqueID values: {bad}")
        df[UNIQUE_ID] = unique_ids.astype("int64")

        duplicated = df[UNIQUE_ID].duplicated(keep=False)
        if duplicated.any():
            raise LoadError(
                source,
                f"UniqueID values are not unique: {sorted(df.loc[duplicated, UNIQUE_ID].unique().tolist())[:5]}",
            )

        df[PARCEL_ID] = df[PARCEL_ID].map(lambda v: v.strip() if isinstance(v, str) else v)
        df[SALE_DATE] = pd.to_datetime(df[SALE_DATE], errors="coerce").dt.normalize()

        for column in NUMERIC_COLUMNS:
            if column in df.columns:
                df[column] = pd.to_numeric(df[column].map(parse_currency), errors="coerce")

        for column in NON_NEGATIVE_COLUMNS:
            if column in df.columns:
                negative = df[column] < 0
                if negative.any():
                    logger.warning("negative_values_nulled", column=column, count=int(negative.sum()))
                    df[column] = df[column].mask(negative)

        unparsed_dates = int(df[SALE_DATE].isna().sum())
        if unparsed_dates:
            logger.warning("sale_dates_missing", count=unparsed_dates)

        logger.info("dataset_prepared", source=str(source), rows=len(df))
        return df.reset_index(drop=True)
