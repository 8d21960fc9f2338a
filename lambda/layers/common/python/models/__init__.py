"""
Ledger Reconciliation - Data Models
===================================

Typed data models for bank/book reconciliation.
"""

from .bank_record import BankRecord
from .book_record import BookRecord
from .reconciliation_result import (
    AnalysisInsight,
    AnalysisReport,
    Confidence,
    ErrorBucket,
    ErrorType,
    InsightType,
    MatchStatus,
    ReconciledItem,
    ReconciliationResult,
    ReconciliationStats,
)

__all__ = [
    "BankRecord",
    "BookRecord",
    "AnalysisInsight",
    "AnalysisReport",
    "Confidence",
    "ErrorBucket",
    "ErrorType",
    "InsightType",
    "MatchStatus",
    "ReconciledItem",
    "ReconciliationResult",
    "ReconciliationStats",
]
