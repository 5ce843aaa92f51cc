"""
City Summary Data Model

One row of the per-city analytics report.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CitySummary(BaseModel):
    """
    Descriptive sale metrics for a single city.

    Any metric is None when the city has no rows with a value in the
    metric's source column.

    Attributes:
        city: City parsed from PropertyAddress
        average_total_value: Mean TotalValue, 2 decimal places
        average_sale_price: Mean SalePrice, 2 decimal places
        rolling_sale_price_sum: Rolling row-window SalePrice sum at the
            city's latest sale
        median_sale_price: Interpolated median SalePrice
        sale_count: Rows with a SalePrice
    """

    model_config = ConfigDict(populate_by_name=True)

    city: str = Field(..., alias="City", description="City name")
    average_total_value: Optional[float] = Field(
        None, alias="AverageTotalValueByCity", description="Average total value"
    )
    average_sale_price: Optional[float] = Field(
        None, alias="AverageSalePriceByCity", description="Average sale price"
    )
    rolling_sale_price_sum: Optional[float] = Field(
        None, alias="Rolling30DaySumSalePrice", description="Rolling sale price sum"
    )
    median_sale_price: Optional[float] = Field(
        None, alias="MedianSalePrice", description="Median sale price"
    )
    sale_count: int = Field(0, alias="SaleCount", description="Rows with a sale price", ge=0)

    def to_dict(self) -> dict:
        """Convert to a row dict keyed by report column names."""
        return self.model_dump(by_alias=True)
