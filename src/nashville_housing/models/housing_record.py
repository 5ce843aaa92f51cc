"""
Housing Record Data Models

Pydantic model for one row of the Nashville Housing dataset, plus the
canonical column names shared by every pipeline stage.
"""
import re
from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

UNIQUE_ID = "UniqueID"
PARCEL_ID = "ParcelID"
LAND_USE = "LandUse"
PROPERTY_ADDRESS = "PropertyAddress"
SALE_DATE = "SaleDate"
SALE_DATE_TEXT = "SaleDateText"
SALE_PRICE = "SalePrice"
LEGAL_REFERENCE = "LegalReference"
SOLD_AS_VACANT = "SoldAsVacant"
OWNER_NAME = "OwnerName"
OWNER_ADDRESS = "OwnerAddress"
ACREAGE = "Acreage"
TAX_DISTRICT = "TaxDistrict"
LAND_VALUE = "LandValue"
BUILDING_VALUE = "BuildingValue"
TOTAL_VALUE = "TotalValue"
YEAR_BUILT = "YearBuilt"
BEDROOMS = "Bedrooms"
FULL_BATH = "FullBath"
HALF_BATH = "HalfBath"

# Derived by the address parser
STREET_NUMBER = "StreetNumber"
DESIGNATOR = "Designator"
CITY = "City"
ADDRESS_PARSE_FAILED = "AddressParseFailed"

REQUIRED_COLUMNS = [UNIQUE_ID, PARCEL_ID, PROPERTY_ADDRESS, SALE_DATE, LEGAL_REFERENCE]
DEDUP_KEY = [PARCEL_ID, PROPERTY_ADDRESS, SALE_DATE, LEGAL_REFERENCE]
NUMERIC_COLUMNS = [
    SALE_PRICE, ACREAGE, LAND_VALUE, BUILDING_VALUE, TOTAL_VALUE,
    YEAR_BUILT, BEDROOMS, FULL_BATH, HALF_BATH,
]
# Negative values in these columns are treated as missing
NON_NEGATIVE_COLUMNS = [
    SALE_PRICE, ACREAGE, LAND_VALUE, BUILDING_VALUE, TOTAL_VALUE,
    BEDROOMS, FULL_BATH, HALF_BATH,
]

_CURRENCY_CHARS = re.compile(r"[$,\s]")


def parse_currency(value: Any) -> Optional[float]:
    """
    Convert a currency-like value ("$120,000", "95000", 95000) to float.

    Returns None for blanks and values that are not numbers.
    """
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return None if value != value else float(value)  # NaN check
    cleaned = _CURRENCY_CHARS.sub("", str(value))
    if not cleaned:
        return None
    try:
        return float(cleaned)
    except ValueError:
        return None


class HousingRecord(BaseModel):
    """
    One property-sale record from the Nashville Housing dataset.

    Field names follow Python conventions; aliases carry the dataset's
    column names so records round-trip through DataFrames unchanged.

    Attributes:
        unique_id: Stable row identity, used as the dedup tie-break
        parcel_id: Parcel identifier shared by records of the same property
        property_address: "<number> <street>, <city>" composite address
        sale_date: Canonical sale date
        sale_price: Sale price in dollars
        legal_reference: Deed reference, part of the duplicate key
        sold_as_vacant: Raw vacancy flag ("Yes", "No", ...)
    """

    model_config = ConfigDict(
        populate_by_name=True,
        str_strip_whitespace=True,
        validate_assignment=True,
    )

    unique_id: int = Field(..., alias=UNIQUE_ID, description="Unique row identifier")
    parcel_id: str = Field(..., alias=PARCEL_ID, description="Parcel identifier")
    land_use: Optional[str] = Field(None, alias=LAND_USE, description="Land use classification")
    property_address: Optional[str] = Field(None, alias=PROPERTY_ADDRESS, description="Property address")
    sale_date: Optional[date] = Field(None, alias=SALE_DATE, description="Sale date")
    sale_price: Optional[float] = Field(None, alias=SALE_PRICE, description="Sale price")
    legal_reference: Optional[str] = Field(None, alias=LEGAL_REFERENCE, description="Legal reference")
    sold_as_vacant: Optional[str] = Field(None, alias=SOLD_AS_VACANT, description="Sold as vacant flag")
    owner_name: Optional[str] = Field(None, alias=OWNER_NAME, description="Owner name")
    owner_address: Optional[str] = Field(None, alias=OWNER_ADDRESS, description="Owner address")
    acreage: Optional[float] = Field(None, alias=ACREAGE, description="Lot acreage")
    tax_district: Optional[str] = Field(None, alias=TAX_DISTRICT, description="Tax district")
    land_value: Optional[float] = Field(None, alias=LAND_VALUE, description="Land value")
    building_value: Optional[float] = Field(None, alias=BUILDING_VALUE, description="Building value")
    total_value: Optional[float] = Field(None, alias=TOTAL_VALUE, description="Total value")
    year_built: Optional[int] = Field(None, alias=YEAR_BUILT, description="Year built")
    bedrooms: Optional[float] = Field(None, alias=BEDROOMS, description="Bedroom count")
    full_bath: Optional[float] = Field(None, alias=FULL_BATH, description="Full baths")
    half_bath: Optional[float] = Field(None, alias=HALF_BATH, description="Half baths")

    @field_validator("sale_price", "land_value", "building_value", "total_value", mode="before")
    @classmethod
    def coerce_currency(cls, v):
        """Accept "$120,000"-style strings for currency columns."""
        return parse_currency(v)

    @field_validator("sale_date", mode="before")
    @classmethod
    def coerce_sale_date(cls, v):
        """Accept datetimes and blank strings for the sale date."""
        if isinstance(v, datetime):
            return v.date()
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator(
        "land_use", "property_address", "legal_reference", "sold_as_vacant",
        "owner_name", "owner_address", "tax_district", mode="before",
    )
    @classmethod
    def blank_to_none(cls, v):
        """Treat empty strings as missing."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def to_dict(self) -> dict:
        """Convert to a row dict keyed by dataset column names."""
        return self.model_dump(by_alias=True)
