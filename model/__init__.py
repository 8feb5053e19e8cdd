"""Module records and canonical-owner scoring."""

from .records import (
    DistributionUnit,
    ModuleRecord,
    SymbolLocation,
    split_location_segments,
    split_name_segments,
)
from .canonicalization import CanonicalizationScorer, CanonicalDecision, Reason
from .diagnostics import PackageWarning, WarningCollector

__all__ = [
    "DistributionUnit",
    "ModuleRecord",
    "SymbolLocation",
    "split_location_segments",
    "split_name_segments",
    "CanonicalizationScorer",
    "CanonicalDecision",
    "Reason",
    "PackageWarning",
    "WarningCollector",
]
