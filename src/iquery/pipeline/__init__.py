"""Query pipeline driver and result formatting."""

from iquery.pipeline.driver import PipelineDriver
from iquery.pipeline.formatter import print_results
from iquery.pipeline.schemas import MetadataTable, OutputRow

__all__ = [
    "MetadataTable",
    "OutputRow",
    "PipelineDriver",
    "print_results",
]
