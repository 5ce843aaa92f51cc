"""
Address Parsing Transformer

Splits the composite PropertyAddress ("1808 FOX CHASE DR, GOODLETTSVILLE")
into street number, street designator and city.
"""
from dataclasses import dataclass
from typing import Optional

import pandas as pd

from src.nashville_housing.exceptions import MalformedAddress
from src.nashville_housing.models.housing_record import (
    ADDRESS_PARSE_FAILED,
    CITY,
    DESIGNATOR,
    PROPERTY_ADDRESS,
    STREET_NUMBER,
    UNIQUE_ID,
)
from src.nashville_housing.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class ParsedAddress:
    """
    Parsed address components.

    Attributes:
        street_number: House/building number
        designator: Street name plus type suffix (e.g. "FOX CHASE DR")
        city: City name
    """
    street_number: Optional[str] = None
    designator: Optional[str] = None
    city: Optional[str] = None


class AddressParser:
    """
    Decomposes "<number> <street>, <city>" addresses.

    Parsing is per row: a malformed address never aborts a batch.
    """

    def __init__(self):
        """Initialize address parser."""
        self.stats = {"parsed": 0, "malformed": 0, "missing": 0}
        logger.info("address_parser_initialized")

    def parse(self, address: str) -> ParsedAddress:
        """
        Parse a single property address.

        The street number is everything before the first space, the city is
        everything after the last comma, and the designator is what lies
        between them. Each part is trimmed; internal spacing is kept.

        Args:
            address: Composite property address

        Returns:
            ParsedAddress with all three components set

        Raises:
            MalformedAddress: If the address has no comma, no space before
                the comma, or an empty component
        """
        if address is None:
            raise MalformedAddress(address, "address is missing")

        text = str(address).strip()
        last_comma = text.rfind(",")
        if last_comma == -1:
            raise MalformedAddress(address, "no comma separating the city")

        street = text[:last_comma].strip()
        city = text[last_comma + 1:].strip()

        first_space = street.find(" ")
        if first_space == -1:
            raise MalformedAddress(address, "no space after the street number")

        street_number = street[:first_space].strip()
        designator = street[first_space + 1:].strip()

        if not street_number or not designator or not city:
            raise MalformedAddress(address, "empty address component")

        return ParsedAddress(street_number=street_number, designator=designator, city=city)

    def parse_frame(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Add StreetNumber, Designator, City and AddressParseFailed columns.

        Rows whose address cannot be parsed keep their PropertyAddress and
        get null components with AddressParseFailed set.

        Args:
            df: Housing records

        Returns:
            New DataFrame with the parsed columns
        """
        self.stats = {"parsed": 0, "malformed": 0, "missing": 0}
        df = df.copy()

        street_numbers = []
        designators = []
        cities = []
        failed = []

        for unique_id, address in zip(df[UNIQUE_ID], df[PROPERTY_ADDRESS]):
            if pd.isna(address) or not str(address).strip():
                self.stats["missing"] += 1
                parsed, is_failed = ParsedAddress(), False
            else:
                try:
                    parsed, is_failed = self.parse(address), False
                    self.stats["parsed"] += 1
                except MalformedAddress as exc:
                    self.stats["malformed"] += 1
                    logger.warning(
                        "malformed_address",
                        unique_id=int(unique_id),
                        address=str(address)[:80],
                        reason=exc.reason,
                    )
                    parsed, is_failed = ParsedAddress(), True

            street_numbers.append(parsed.street_number)
            designators.append(parsed.designator)
            cities.append(parsed.city)
            failed.append(is_failed)

        df[STREET_NUMBER] = pd.Series(street_numbers, index=df.index, dtype="object")
        df[DESIGNATOR] = pd.Series(designators, index=df.index, dtype="object")
        df[CITY] = pd.Series(cities, index=df.index, dtype="object")
        df[ADDRESS_PARSE_FAILED] = pd.Series(failed, index=df.index, dtype="bool")

        logger.info("address_parse_complete", **self.stats)
        return df
