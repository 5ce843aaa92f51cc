"""
Unit tests for data-quality helpers
"""
import pandas as pd

from src.nashville_housing.monitoring.data_quality import (
    build_quality_report,
    parcels_missing_address,
    parcels_missing_owner_address,
    parcels_with_multiple_owners,
    value_maxima,
)


def raw_records():
    return pd.DataFrame(
        {
            "UniqueID": [1, 2, 3, 4, 5],
            "ParcelID": ["A", "A", "B", "B", "C"],
            "PropertyAddress": ["1 A St, Nashville", None, None, None, "3 C St, Antioch"],
            "OwnerName": ["SMITH, JOHN", "DOE, JANE", "LEE, KIM", None, "PARK, SAM"],
            "OwnerAddress": [None, "1 A St, Nashville, TN", None, None, None],
            "TotalValue": [100000.0, None, 250000.0, None, 90000.0],
            "LandValue": [20000.0, None, 50000.0, None, 10000.0],
            "BuildingValue": [80000.0, None, 200000.0, None, 80000.0],
            "Bedrooms": [3.0, None, 5.0, None, 2.0],
            "FullBath": [2.0, None, 3.0, None, 1.0],
        }
    )


def test_parcels_with_multiple_owners():
    result = parcels_with_multiple_owners(raw_records())

    assert result["ParcelID"].tolist() == ["A"]
    assert result["OwnerCount"].tolist() == [2]


def test_parcels_missing_address():
    result = parcels_missing_address(raw_records())

    # Parcel B has no address anywhere, so it is not recoverable
    assert result["UniqueID"].tolist() == [2]


def test_parcels_missing_owner_address():
    result = parcels_missing_owner_address(raw_records())

    assert result["UniqueID"].tolist() == [1]


def test_value_maxima():
    maxima = value_maxima(raw_records())

    assert maxima == {
        "MaxTotalValue": 250000.0,
        "MaxLandValue": 50000.0,
        "MaxBuildingValue": 200000.0,
        "MaxBedrooms": 5.0,
        "MaxFullBaths": 3.0,
    }


def test_value_maxima_missing_columns():
    maxima = value_maxima(pd.DataFrame({"UniqueID": [1]}))

    assert all(value is None for value in maxima.values())


def test_build_quality_report():
    report = build_quality_report(raw_records())

    assert report["rows"] == 5
    assert report["missing_property_address"] == 3
    assert report["recoverable_property_address"] == 1
    assert report["recoverable_owner_address"] == 1
    assert report["parcels_with_multiple_owners"] == 1
    assert report["value_maxima"]["MaxTotalValue"] == 250000.0


def test_blank_addresses_count_as_missing():
    df = pd.DataFrame(
        {
            "UniqueID": [1, 2, 3],
            "ParcelID": ["A", "A", "B"],
            "PropertyAddress": ["1 A St, Nashville", "   ", ""],
        }
    )

    assert parcels_missing_address(df)["UniqueID"].tolist() == [2]

    report = build_quality_report(df)
    assert report["missing_property_address"] == 2
    assert report["recoverable_property_address"] == 1
