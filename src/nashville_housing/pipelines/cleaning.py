"""
Nashville Housing cleaning pipeline.

Runs the stages in order over the full table:
load -> normalize -> parse addresses -> deduplicate -> summarize.
"""
from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

import pandas as pd

from config.settings import settings
from src.nashville_housing.analytics.city_summary import HousingAnalytics
from src.nashville_housing.etl.loaders import HousingLoader, is_database_url
from src.nashville_housing.etl.writers import HousingWriter
from src.nashville_housing.exceptions import LoadError
from src.nashville_housing.monitoring.data_quality import build_quality_report
from src.nashville_housing.pipelines.deduplication import RecordDeduplicator
from src.nashville_housing.transformers.address_parser import AddressParser
from src.nashville_housing.transformers.field_normalizer import FieldNormalizer
from src.nashville_housing.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


@dataclass
class PipelineResult:
    """Outputs of one pipeline run."""

    records: pd.DataFrame
    summary: Optional[pd.DataFrame] = None
    quality_report: Dict = field(default_factory=dict)
    stats: Dict[str, int] = field(default_factory=dict)


class CleaningPipeline:
    """Cleans housing records and derives the city summary."""

    def __init__(
        self,
        normalizer: FieldNormalizer | None = None,
        parser: AddressParser | None = None,
        deduplicator: RecordDeduplicator | None = None,
        analytics: HousingAnalytics | None = None,
    ):
        self.normalizer = normalizer or FieldNormalizer()
        self.parser = parser or AddressParser()
        self.deduplicator = deduplicator or RecordDeduplicator()
        self.analytics = analytics or HousingAnalytics()

    def run(self, df: pd.DataFrame, skip_analytics: bool = False) -> PipelineResult:
        """
        Clean a prepared housing table.

        Args:
            df: Records as returned by HousingLoader
            skip_analytics: Do not build the city summary

        Returns:
            PipelineResult with the cleaned records and, unless skipped,
            the city summary
        """
        quality_report = build_quality_report(df)
        logger.info("raw_quality_report", **quality_report)

        normalized = self.normalizer.normalize(df)
        parsed = self.parser.parse_frame(normalized)
        deduplicated = self.deduplicator.deduplicate(parsed)

        stats = {
            "input_rows": len(df),
            "output_rows": len(deduplicated),
            "duplicates_removed": self.deduplicator.removed,
            "addresses_backfilled": self.normalizer.stats.get("addresses_backfilled", 0),
            "ambiguous_backfills": self.normalizer.stats.get("ambiguous_backfills", 0),
            "malformed_addresses": self.parser.stats["malformed"],
        }

        summary = None
        if not skip_analytics:
            summary = self.analytics.build_summary(deduplicated)
            stats["cities"] = len(summary)

        logger.info("pipeline_complete", **stats)
        return PipelineResult(
            records=deduplicated,
            summary=summary,
            quality_report=quality_report,
            stats=stats,
        )

    def run_from_source(
        self,
        source: Union[str, Path],
        output: Union[str, Path, None] = None,
        summary_output: Union[str, Path, None] = None,
        skip_analytics: bool = False,
        table: Optional[str] = None,
        loader: HousingLoader | None = None,
        writer: HousingWriter | None = None,
    ) -> PipelineResult:
        """
        Load, clean and optionally write the results.

        Raises:
            LoadError: If the source cannot be loaded
        """
        loader = loader or HousingLoader()
        df = loader.load(source, table=table)

        result = self.run(df, skip_analytics=skip_analytics)

        writer = writer or HousingWriter()
        if output:
            writer.write(result.records, output, table=settings.output_table)
        if summary_output and result.summary is not None:
            writer.write(result.summary, summary_output, table=settings.summary_table)
        return result


def default_summary_path(output: Union[str, Path]) -> Union[str, Path]:
    """Summary target next to the cleaned output ("x.csv" -> "x_city_summary.csv")."""
    if is_database_url(output):
        return output
    path = Path(output)
    return path.with_name(f"{path.stem}_city_summary{path.suffix}")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Clean the Nashville Housing dataset and summarize sales by city")
    parser.add_argument(
        "input",
        nargs="?",
        default=settings.database_url or settings.input_path,
        help="Input CSV/Excel/Parquet file or database URL (defaults to DATABASE_URL, then INPUT_PATH)",
    )
    parser.add_argument("--output", default=None, help="Cleaned output file or database URL (defaults to OUTPUT_PATH)")
    parser.add_argument("--summary-output", default=None, help="City summary destination (defaults to SUMMARY_OUTPUT_PATH, or next to --output when given)")
    parser.add_argument("--skip-analytics", action="store_true", help="Only clean the records")
    parser.add_argument("--table", default=None, help="Source table for database inputs")
    parser.add_argument("--log-format", choices=["json", "console"], default=None, help="Override log format")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(log_format=args.log_format)

    output = args.output or settings.output_path
    summary_output = None
    if not args.skip_analytics:
        if args.summary_output:
            summary_output = args.summary_output
        elif args.output:
            summary_output = default_summary_path(args.output)
        else:
            summary_output = settings.summary_output_path

    pipeline = CleaningPipeline()
    try:
        result = pipeline.run_from_source(
            args.input,
            output=output,
            summary_output=summary_output,
            skip_analytics=args.skip_analytics,
            table=args.table,
        )
    except LoadError as exc:
        logger.error("load_failed", source=exc.source, reason=exc.reason)
        return 1

    print(
        "\nNashville Housing cleaning complete:\n"
        f"  Input rows:          {result.stats['input_rows']}\n"
        f"  Output rows:         {result.stats['output_rows']}\n"
        f"  Duplicates removed:  {result.stats['duplicates_removed']}\n"
        f"  Addresses backfilled: {result.stats['addresses_backfilled']}\n"
        f"  Malformed addresses: {result.stats['malformed_addresses']}\n"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
