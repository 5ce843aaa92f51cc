"""
Pipelines Package

Data transformation pipelines:
- Deduplication: duplicate sale record removal
- Cleaning: end-to-end cleaning and city summary
"""
from src.nashville_housing.pipelines.deduplication import RecordDeduplicator
from src.nashville_housing.pipelines.cleaning import CleaningPipeline, PipelineResult

__all__ = ["RecordDeduplicator", "CleaningPipeline", "PipelineResult"]
