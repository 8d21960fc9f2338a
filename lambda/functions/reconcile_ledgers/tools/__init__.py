"""
Ledger Reconciliation Tools
===========================

Pipeline stages used by the reconciliation engine.
"""

from .ingestion import LedgerFormatError, parse_amount, parse_bank_csv, parse_book_csv, split_csv_line
from .error_classification import Classification, classify_variance, is_transposition
from .exact_matching import ExactMatchOutcome, index_bank_records, match_exact
from .fuzzy_matching import (
    DEFAULT_STRATEGIES,
    FuzzyMatch,
    FuzzyResolution,
    PairingStrategy,
    amount_exact_id_fuzzy,
    edit_distance,
    id_very_fuzzy_amount_mismatch,
    resolve_unmatched,
)
from .report_generation import (
    INSIGHT_RULES,
    InsightRule,
    ReportMetrics,
    build_metrics,
    compute_stats,
    error_distribution,
    fired_rules,
    generate_analysis_report,
)

__all__ = [
    "LedgerFormatError",
    "parse_amount",
    "parse_bank_csv",
    "parse_book_csv",
    "split_csv_line",
    "Classification",
    "classify_variance",
    "is_transposition",
    "ExactMatchOutcome",
    "index_bank_records",
    "match_exact",
    "DEFAULT_STRATEGIES",
    "FuzzyMatch",
    "FuzzyResolution",
    "PairingStrategy",
    "amount_exact_id_fuzzy",
    "edit_distance",
    "id_very_fuzzy_amount_mismatch",
    "resolve_unmatched",
    "INSIGHT_RULES",
    "InsightRule",
    "ReportMetrics",
    "build_metrics",
    "compute_stats",
    "error_distribution",
    "fired_rules",
    "generate_analysis_report",
]
