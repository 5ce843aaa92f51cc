"""
ETL Writers

Persist the cleaned table and the city summary to CSV, Parquet or a SQL table.
"""
from pathlib import Path
from typing import Optional, Union

import pandas as pd
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from src.nashville_housing.etl.loaders import is_database_url
from src.nashville_housing.utils.logger import get_logger

logger = get_logger(__name__)


class HousingWriter:
    """Write DataFrames to files or database tables."""

    def __init__(self, engine: Optional[Engine] = None):
        self.engine = engine

    def write(self, df: pd.DataFrame, target: Union[str, Path], table: Optional[str] = None) -> str:
        """
        Write a DataFrame to a file or database table.

        The file format follows the target suffix (.csv or .parquet).
        Database targets replace the table if it already exists.

        Args:
            df: Frame to write
            target: File path or SQLAlchemy database URL
            table: Table name for database targets

        Returns:
            Description of where the data was written
        """
        if is_database_url(target):
            if not table:
                raise ValueError("A table name is required for database targets")
            engine = self.engine or create_engine(str(target))
            df.to_sql(table, engine, if_exists="replace", index=False)
            logger.info("table_written", table=table, rows=len(df))
            return f"{target}#{table}"

        path = Path(target)
        path.parent.mkdir(parents=True, exist_ok=True)
        suffix = path.suffix.lower()
        if suffix == ".csv":
            df.to_csv(path, index=False)
        elif suffix == ".parquet":
            df.to_parquet(path, index=False)
        else:
            raise ValueError(f"Unsupported output type '{path.suffix}'. Use .csv or .parquet")

        logger.info("file_written", path=str(path), rows=len(df))
        return str(path)
