"""Cross-border transfer detection and activity analysis."""

from src.services.transfers.aggregator import (
    ActivityTransferAnalysis,
    CountryTally,
    CrossBorderTransfer,
    TransferAggregator,
    TransferSummary,
)

__all__ = [
    "TransferAggregator",
    "CrossBorderTransfer",
    "ActivityTransferAnalysis",
    "TransferSummary",
    "CountryTally",
]
