"""
City Sales Analytics

Read-only descriptive statistics over the cleaned housing table:
per-city averages, a rolling SalePrice sum ordered by sale date and the
per-city median sale price.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional

import pandas as pd

from config.settings import settings
from src.nashville_housing.models.city_summary import CitySummary
from src.nashville_housing.models.housing_record import (
    CITY,
    DESIGNATOR,
    SALE_DATE,
    SALE_PRICE,
    STREET_NUMBER,
    TOTAL_VALUE,
    UNIQUE_ID,
)
from src.nashville_housing.utils.logger import get_logger

logger = get_logger(__name__)

AVERAGE_TOTAL_VALUE = "AverageTotalValueByCity"
AVERAGE_SALE_PRICE = "AverageSalePriceByCity"
ROLLING_SALE_PRICE = "Rolling30DaySumSalePrice"
MEDIAN_SALE_PRICE = "MedianSalePrice"
SALE_COUNT = "SaleCount"

SUMMARY_COLUMNS = [
    CITY,
    AVERAGE_TOTAL_VALUE,
    AVERAGE_SALE_PRICE,
    ROLLING_SALE_PRICE,
    MEDIAN_SALE_PRICE,
    SALE_COUNT,
]


def round_currency(value: Optional[float]) -> Optional[float]:
    """Round half away from zero to cents; None and NaN pass through as None."""
    if value is None or pd.isna(value):
        return None
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


class HousingAnalytics:
    """
    Computes city-level sale metrics.

    Each metric only looks at rows where its source column has a value;
    a city with no such rows gets a null metric.
    """

    def __init__(self, window_preceding: Optional[int] = None):
        """
        Args:
            window_preceding: Rows before the current one included in the
                rolling sum (the window is this many rows plus one)
        """
        self.window_preceding = (
            settings.rolling_window_preceding if window_preceding is None else window_preceding
        )
        if self.window_preceding < 0:
            raise ValueError("window_preceding must be >= 0")

    @staticmethod
    def _rows_with(df: pd.DataFrame, column: str, require_city: bool = True) -> pd.DataFrame:
        mask = df[column].notna()
        if require_city:
            mask &= df[CITY].notna()
        return df.loc[mask]

    def average_total_value_by_city(self, df: pd.DataFrame) -> pd.Series:
        """Mean TotalValue per city, rounded to 2 decimals."""
        rows = self._rows_with(df, TOTAL_VALUE)
        means = rows.groupby(CITY)[TOTAL_VALUE].mean()
        return means.map(round_currency).rename(AVERAGE_TOTAL_VALUE)

    def average_sale_price_by_city(self, df: pd.DataFrame) -> pd.Series:
        """Mean SalePrice per city, rounded to 2 decimals."""
        rows = self._rows_with(df, SALE_PRICE)
        means = rows.groupby(CITY)[SALE_PRICE].mean()
        return means.map(round_currency).rename(AVERAGE_SALE_PRICE)

    def median_sale_price_by_city(self, df: pd.DataFrame) -> pd.Series:
        """Interpolated median SalePrice per city."""
        rows = self._rows_with(df, SALE_PRICE)
        return rows.groupby(CITY)[SALE_PRICE].median().rename(MEDIAN_SALE_PRICE)

    def sale_count_by_city(self, df: pd.DataFrame) -> pd.Series:
        """Number of rows with a SalePrice per city."""
        rows = self._rows_with(df, SALE_PRICE)
        return rows.groupby(CITY)[SALE_PRICE].count().rename(SALE_COUNT)

    def rolling_sale_price_sum(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Rolling SalePrice sum over a fixed number of rows ordered by SaleDate.

        Rows with a SalePrice are sorted by SaleDate (missing dates first),
        then UniqueID. Each row's value is the sum of its own price and the
        prices of the ``window_preceding`` rows before it. The window counts
        rows, not calendar days.

        Returns:
            The priced rows in sale order with a Rolling30DaySumSalePrice column
        """
        rows = self._rows_with(df, SALE_PRICE, require_city=False)
        ordered = rows.sort_values(
            [SALE_DATE, UNIQUE_ID], kind="mergesort", na_position="first"
        ).copy()
        ordered[ROLLING_SALE_PRICE] = (
            ordered[SALE_PRICE]
            .rolling(window=self.window_preceding + 1, min_periods=1)
            .sum()
        )
        return ordered

    def rolling_sale_price_by_city(self, df: pd.DataFrame) -> pd.Series:
        """Rolling sum value at each city's latest sale."""
        ordered = self.rolling_sale_price_sum(df)
        ordered = ordered.loc[ordered[CITY].notna()]
        return ordered.groupby(CITY)[ROLLING_SALE_PRICE].last().rename(ROLLING_SALE_PRICE)

    def build_summary(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Join every city metric into one row per city.

        Args:
            df: Cleaned housing records with a City column

        Returns:
            DataFrame with SUMMARY_COLUMNS, sorted by City
        """
        if df.empty or CITY not in df.columns:
            logger.info("city_summary_empty")
            return pd.DataFrame(columns=SUMMARY_COLUMNS)

        metrics = [
            self.average_total_value_by_city(df),
            self.average_sale_price_by_city(df),
            self.rolling_sale_price_by_city(df),
            self.median_sale_price_by_city(df),
            self.sale_count_by_city(df),
        ]
        summary = pd.concat(metrics, axis=1, join="outer").sort_index()
        summary.index.name = CITY
        summary[SALE_COUNT] = summary[SALE_COUNT].fillna(0).astype("int64")
        summary = summary.reset_index()[SUMMARY_COLUMNS]

        empty_metrics = int(summary[[AVERAGE_TOTAL_VALUE, AVERAGE_SALE_PRICE, MEDIAN_SALE_PRICE]].isna().sum().sum())
        logger.info("city_summary_built", cities=len(summary), empty_metrics=empty_metrics)
        return summary

    def summarize(self, df: pd.DataFrame) -> List[CitySummary]:
        """Build the summary as CitySummary models."""
        summary = self.build_summary(df)
        records = summary.astype(object).where(summary.notna(), None).to_dict(orient="records")
        return [CitySummary.model_validate(record) for record in records]

    def build_detail(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Per-record report: parsed address, values and the city metrics.

        Only rows with a TotalValue are reported. The rolling sum is None for
        rows without a SalePrice.
        """
        columns = [
            STREET_NUMBER, DESIGNATOR, CITY, TOTAL_VALUE, SALE_PRICE, SALE_DATE,
            AVERAGE_TOTAL_VALUE, AVERAGE_SALE_PRICE, ROLLING_SALE_PRICE, MEDIAN_SALE_PRICE,
        ]
        if df.empty:
            return pd.DataFrame(columns=columns)

        rows = df.loc[df[TOTAL_VALUE].notna()].copy()
        rolling = self.rolling_sale_price_sum(df)[ROLLING_SALE_PRICE]

        rows[AVERAGE_TOTAL_VALUE] = rows[CITY].map(self.average_total_value_by_city(df))
        rows[AVERAGE_SALE_PRICE] = rows[CITY].map(self.average_sale_price_by_city(df))
        rows[ROLLING_SALE_PRICE] = rolling.reindex(rows.index)
        rows[MEDIAN_SALE_PRICE] = rows[CITY].map(self.median_sale_price_by_city(df))

        detail = rows.sort_values([SALE_DATE, UNIQUE_ID], kind="mergesort", na_position="first")
        return detail[columns].reset_index(drop=True)
