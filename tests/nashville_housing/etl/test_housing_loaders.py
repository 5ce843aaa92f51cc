"""
Tests for ETL loaders and writers

Covers file and database sources, type coercion and load failures.
"""
from datetime import date

import pandas as pd
import pytest
from sqlalchemy import create_engine

from src.nashville_housing.etl.loaders import HousingLoader, is_database_url
from src.nashville_housing.etl.writers import HousingWriter
from src.nashville_housing.exceptions import LoadError

RAW_CSV = """UniqueID ,ParcelID,LandUse,PropertyAddress,SaleDate,SalePrice,LegalReference,SoldAsVacant,OwnerName,OwnerAddress,Acreage,TaxDistrict,LandValue,BuildingValue,TotalValue,YearBuilt,Bedrooms,FullBath,HalfBath
2045,007 00 0 125.00,SINGLE FAMILY,"1808  FOX CHASE DR, GOODLETTSVILLE",2013-04-09,240000,20130412-0036474,No,"FRAZIER, CYRENTHA LYNETTE","1808  FOX CHASE DR, GOODLETTSVILLE, TN",2.3,GENERAL SERVICES DISTRICT,50000,168200,235700,1986,3,3,0
16918,007 00 0 130.00,SINGLE FAMILY,"1832  FOX CHASE DR, GOODLETTSVILLE",2014-06-10,"$366,000",20140619-0053768,Yes,"BONER, CHARLES & LESLIE","1832  FOX CHASE DR, GOODLETTSVILLE, TN",3.5,GENERAL SERVICES DISTRICT,50000,264100,319000,1998,3,3,2
54582,007 00 0 138.00,SINGLE FAMILY,,2016-09-19,435000,20160927-0101718,No,,,,,,,,,,,
"""


@pytest.fixture
def raw_csv(tmp_path):
    path = tmp_path / "nashville_housing.csv"
    path.write_text(RAW_CSV)
    return path


class TestHousingLoader:
    """Tests for HousingLoader"""

    def test_load_csv(self, raw_csv):
        """Test loading the dataset's CSV layout"""
        df = HousingLoader().load(raw_csv)

        assert len(df) == 3
        assert "UniqueID" in df.columns
        assert df["UniqueID"].tolist() == [2045, 16918, 54582]
        assert df["ParcelID"].iloc[0] == "007 00 0 125.00"

    def test_load_coerces_types(self, raw_csv):
        """Test currency, date and numeric coercion"""
        df = HousingLoader().load(raw_csv)

        assert df["SalePrice"].tolist() == [240000.0, 366000.0, 435000.0]
        assert df["SaleDate"].iloc[1].date() == date(2014, 6, 10)
        assert df["TotalValue"].iloc[0] == 235700.0
        assert pd.isna(df["TotalValue"].iloc[2])
        assert pd.isna(df["PropertyAddress"].iloc[2])

    def test_load_missing_file(self, tmp_path):
        """Test that a missing file is a LoadError"""
        with pytest.raises(LoadError) as exc_info:
            HousingLoader().load(tmp_path / "missing.csv")

        assert "file not found" in exc_info.value.reason

    def test_load_unsupported_type(self, tmp_path):
        """Test that an unknown file type is a LoadError"""
        path = tmp_path / "data.json"
        path.write_text("[]")

        with pytest.raises(LoadError):
            HousingLoader().load(path)

    def test_load_empty_file(self, tmp_path):
        """Test that an empty CSV is a LoadError"""
        path = tmp_path / "empty.csv"
        path.write_text("")

        with pytest.raises(LoadError):
            HousingLoader().load(path)

    def test_load_missing_columns(self, tmp_path):
        """Test that required columns are enforced"""
        path = tmp_path / "partial.csv"
        path.write_text("UniqueID,ParcelID\n1,A\n")

        with pytest.raises(LoadError) as exc_info:
            HousingLoader().load(path)

        assert "PropertyAddress" in exc_info.value.reason

    def test_load_duplicate_unique_ids(self, tmp_path):
        """Test that repeated UniqueIDs are rejected"""
        path = tmp_path / "dupes.csv"
        path.write_text(
            "UniqueID,ParcelID,PropertyAddress,SaleDate,LegalReference\n"
            "1,A,\"1 A St, Nashville\",2014-01-01,R1\n"
            "1,B,\"2 B St, Nashville\",2014-01-02,R2\n"
        )

        with pytest.raises(LoadError):
            HousingLoader().load(path)

    def test_load_bad_unique_id(self, tmp_path):
        """Test that non-integer UniqueIDs are rejected"""
        path = tmp_path / "bad_ids.csv"
        path.write_text(
            "UniqueID,ParcelID,PropertyAddress,SaleDate,LegalReference\n"
            "abc,A,\"1 A St, Nashville\",2014-01-01,R1\n"
        )

        with pytest.raises(LoadError):
            HousingLoader().load(path)

    def test_load_parquet(self, raw_csv, tmp_path):
        """Test loading a Parquet copy of the dataset"""
        parquet_path = tmp_path / "nashville_housing.parquet"
        pd.read_csv(raw_csv, dtype=str).to_parquet(parquet_path, index=False)

        df = HousingLoader().load(parquet_path)

        assert df["UniqueID"].tolist() == [2045, 16918, 54582]
        assert df["SalePrice"].iloc[1] == 366000.0

    def test_load_sql_table(self, raw_csv, tmp_path):
        """Test loading from a database table"""
        url = f"sqlite:///{tmp_path / 'housing.db'}"
        engine = create_engine(url)
        pd.read_csv(raw_csv, dtype=str).to_sql("NashvilleHousing", engine, index=False)

        df = HousingLoader().load(url, table="NashvilleHousing")

        assert len(df) == 3
        assert df["SaleDate"].iloc[0].date() == date(2013, 4, 9)

    def test_load_sql_missing_table(self, tmp_path):
        """Test that a missing table is a LoadError"""
        url = f"sqlite:///{tmp_path / 'empty.db'}"

        with pytest.raises(LoadError):
            HousingLoader().load(url, table="NashvilleHousing")

    def test_load_records(self):
        """Test validating in-memory rows"""
        df = HousingLoader().load_records([
            {
                "UniqueID": 1,
                "ParcelID": "A",
                "PropertyAddress": "1 A St, Nashville",
                "SaleDate": "2014-01-01",
                "LegalReference": "R1",
                "SalePrice": "$1,250",
            }
        ])

        assert df["SalePrice"].iloc[0] == 1250.0
        assert df["UniqueID"].dtype == "int64"

    def test_load_records_invalid_row(self):
        """Test that a row failing validation is a LoadError"""
        with pytest.raises(LoadError) as exc_info:
            HousingLoader().load_records([{"UniqueID": "not-a-number", "ParcelID": "A"}])

        assert "row 0" in exc_info.value.reason

    def test_load_records_negative_values_nulled(self):
        """Test that negative prices and values load as null instead of failing"""
        df = HousingLoader().load_records([
            {
                "UniqueID": 1,
                "ParcelID": "A",
                "PropertyAddress": "1 A St, Nashville",
                "SaleDate": "2014-01-01",
                "LegalReference": "R1",
                "SalePrice": -5000,
                "TotalValue": "-120000",
                "LandValue": 20000,
            }
        ])

        assert pd.isna(df["SalePrice"].iloc[0])
        assert pd.isna(df["TotalValue"].iloc[0])
        assert df["LandValue"].iloc[0] == 20000.0

    def test_load_csv_negative_values_nulled(self, tmp_path):
        """Test that file sources apply the same negative-value policy"""
        path = tmp_path / "negative.csv"
        path.write_text(
            "UniqueID,ParcelID,PropertyAddress,SaleDate,LegalReference,SalePrice,TotalValue\n"
            '1,A,"1 A St, Nashville",2014-01-01,R1,-5000,-120000\n'
            '2,B,"2 B St, Nashville",2014-01-02,R2,7000,90000\n'
        )

        df = HousingLoader().load(path)

        assert pd.isna(df["SalePrice"].iloc[0])
        assert pd.isna(df["TotalValue"].iloc[0])
        assert df["SalePrice"].iloc[1] == 7000.0

    def test_load_records_empty(self):
        """Test loading no rows"""
        df = HousingLoader().load_records([])

        assert df.empty
        assert "UniqueID" in df.columns

    def test_is_database_url(self):
        """Test URL detection"""
        assert is_database_url("sqlite:///housing.db")
        assert not is_database_url("data/raw/housing.csv")


class TestHousingWriter:
    """Tests for HousingWriter"""

    @pytest.fixture
    def frame(self):
        return pd.DataFrame({"City": ["NASHVILLE", "ANTIOCH"], "MedianSalePrice": [200.0, None]})

    def test_write_csv(self, frame, tmp_path):
        """Test writing CSV, creating parent directories"""
        target = tmp_path / "out" / "summary.csv"

        HousingWriter().write(frame, target)

        written = pd.read_csv(target)
        assert written["City"].tolist() == ["NASHVILLE", "ANTIOCH"]

    def test_write_parquet(self, frame, tmp_path):
        """Test writing Parquet"""
        target = tmp_path / "summary.parquet"

        HousingWriter().write(frame, target)

        assert pd.read_parquet(target)["MedianSalePrice"].iloc[0] == 200.0

    def test_write_sql(self, frame, tmp_path):
        """Test writing a database table"""
        url = f"sqlite:///{tmp_path / 'out.db'}"

        HousingWriter().write(frame, url, table="CitySummary")

        written = pd.read_sql_table("CitySummary", create_engine(url))
        assert len(written) == 2

    def test_write_sql_requires_table(self, frame):
        """Test that database targets need a table name"""
        with pytest.raises(ValueError):
            HousingWriter().write(frame, "sqlite:///:memory:")

    def test_write_unsupported_type(self, frame, tmp_path):
        """Test rejecting unknown output types"""
        with pytest.raises(ValueError):
            HousingWriter().write(frame, tmp_path / "summary.txt")
