"""Duplicate-entity detection package."""

from graphmerge.entity_resolution.strategies import (
    ORPHANED_IDENTIFIER_REASON,
    SHARED_IDENTIFIER_REASON,
    CandidateRow,
    DetectionStrategy,
    OrphanedIdentifierStrategy,
    SharedIdentifierStrategy,
    StrategyPage,
    default_strategies,
)

__all__ = [
    "ORPHANED_IDENTIFIER_REASON",
    "SHARED_IDENTIFIER_REASON",
    "CandidateRow",
    "DetectionStrategy",
    "OrphanedIdentifierStrategy",
    "SharedIdentifierStrategy",
    "StrategyPage",
    "default_strategies",
]
