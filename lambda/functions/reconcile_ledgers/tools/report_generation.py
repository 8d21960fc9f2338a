"""
Analysis Report Tool
====================

Aggregates reconciliation statistics and builds the narrative report:
error-type distribution, threshold-triggered insights and
recommendations.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from aws_lambda_powertools import Logger

from models import (
    AnalysisInsight,
    AnalysisReport,
    BankRecord,
    BookRecord,
    ErrorBucket,
    ErrorType,
    InsightType,
    MatchStatus,
    ReconciledItem,
    ReconciliationStats,
)
from utils import ReconciliationSettings

logger = Logger()


@dataclass(frozen=True)
class ReportMetrics:
    """Figures the insight rules are evaluated against."""
    match_rate: Optional[float]
    transposition_count: int
    keying_count: int
    typo_count: int
    unmatched_bank_count: int
    settings: ReconciliationSettings


@dataclass(frozen=True)
class InsightRule:
    """One row of the insight table: condition, severity and wording."""
    name: str
    insight_type: InsightType
    condition: Callable[[ReportMetrics], bool]
    title: str
    describe: Callable[[ReportMetrics], str]
    recommendation: Optional[str] = None


INSIGHT_RULES: tuple[InsightRule, ...] = (
    InsightRule(
        name="high_match_rate",
        insight_type=InsightType.SUCCESS,
        condition=lambda m: m.match_rate is not None and m.match_rate > m.settings.high_match_rate,
        title="Excellent bookkeeping accuracy",
        describe=lambda m: (
            f"{m.match_rate:.1f}% of bank transactions matched exactly, "
            f"indicating a highly accurate recording process"
        ),
    ),
    InsightRule(
        name="low_match_rate",
        insight_type=InsightType.CRITICAL,
        condition=lambda m: m.match_rate is not None and m.match_rate < m.settings.low_match_rate,
        title="Bookkeeping process at risk",
        describe=lambda m: (
            f"Match rate is below {m.settings.low_match_rate:.0f}% ({m.match_rate:.1f}%); "
            f"review document intake and data entry urgently"
        ),
    ),
    InsightRule(
        name="transposition_errors",
        insight_type=InsightType.WARNING,
        condition=lambda m: m.transposition_count > 0,
        title="Digit transposition errors detected",
        describe=lambda m: (
            f"{m.transposition_count} item(s) show swapped digits; "
            f"check entries against the batch total before recording"
        ),
        recommendation=(
            "Add a grand-total check of source documents before posting to the "
            "ledger to catch transposed digits"
        ),
    ),
    InsightRule(
        name="id_typos",
        insight_type=InsightType.INFO,
        condition=lambda m: m.typo_count > 0,
        title="Mistyped invoice numbers found",
        describe=lambda m: (
            f"{m.typo_count} item(s) were paired by similarity even though "
            f"the invoice number was entered slightly differently"
        ),
        recommendation=(
            "Consider barcode scanning or OCR to capture invoice numbers instead "
            "of typing them by hand"
        ),
    ),
    InsightRule(
        name="missing_documentation",
        insight_type=InsightType.WARNING,
        condition=lambda m: m.unmatched_bank_count > m.settings.missing_documentation_threshold,
        title="Many transactions missing from the books",
        describe=lambda m: (
            f"{m.unmatched_bank_count} bank statement transactions have not been "
            f"recorded in the ledger"
        ),
        recommendation=(
            "Review the closing cycle and follow up on outstanding documents with "
            "the responsible departments (e.g. purchasing or finance)"
        ),
    ),
)


def compute_stats(
    bank_records: Sequence[BankRecord],
    book_records: Sequence[BookRecord],
    items: Sequence[ReconciledItem]
) -> ReconciliationStats:
    """Count items per status and total the amounts on each side."""
    def count(status: MatchStatus) -> int:
        return sum(1 for item in items if item.status == status)

    return ReconciliationStats(
        total_bank=len(bank_records),
        total_book=len(book_records),
        total_bank_amount=sum(r.total_amount for r in bank_records),
        total_book_amount=sum(r.amount for r in book_records),
        matched_count=count(MatchStatus.MATCHED),
        variance_count=count(MatchStatus.VARIANCE),
        potential_match_count=count(MatchStatus.POTENTIAL_MATCH),
        unmatched_bank_count=count(MatchStatus.UNMATCHED_BANK),
        unmatched_book_count=count(MatchStatus.UNMATCHED_BOOK),
    )


def _variance_count(items: Sequence[ReconciledItem], *error_types: ErrorType) -> int:
    return sum(
        1 for item in items
        if item.status == MatchStatus.VARIANCE and item.error_type in error_types
    )


def build_metrics(
    items: Sequence[ReconciledItem],
    stats: ReconciliationStats,
    settings: Optional[ReconciliationSettings] = None
) -> ReportMetrics:
    """Derive the figures the insight rules depend on."""
    return ReportMetrics(
        match_rate=stats.match_rate,
        transposition_count=_variance_count(items, ErrorType.TRANSPOSITION),
        keying_count=_variance_count(items, ErrorType.KEYING, ErrorType.ROUNDING),
        typo_count=stats.potential_match_count,
        unmatched_bank_count=stats.unmatched_bank_count,
        settings=settings or ReconciliationSettings(),
    )


def error_distribution(
    items: Sequence[ReconciledItem],
    stats: ReconciliationStats
) -> tuple[ErrorBucket, ...]:
    """Bucket flagged items by probable cause, dropping empty buckets."""
    buckets = (
        ErrorBucket("Digit Transposition", _variance_count(items, ErrorType.TRANSPOSITION)),
        ErrorBucket(
            "Typo / Keying Error",
            _variance_count(items, ErrorType.KEYING, ErrorType.ROUNDING)
            + stats.potential_match_count
        ),
        # Bank activity with no book entry
        ErrorBucket("Missing Documentation", stats.unmatched_bank_count),
        # Book entry not yet seen by the bank
        ErrorBucket("System / Data Delay", stats.unmatched_book_count),
    )
    return tuple(bucket for bucket in buckets if bucket.value > 0)


def fired_rules(
    metrics: ReportMetrics,
    rules: Sequence[InsightRule] = INSIGHT_RULES
) -> list[InsightRule]:
    """Rules whose condition holds, in table order."""
    return [rule for rule in rules if rule.condition(metrics)]


def _summary(stats: ReconciliationStats, metrics: ReportMetrics) -> str:
    if metrics.transposition_count > metrics.keying_count:
        cause = "data-entry errors (digit transposition)"
    else:
        cause = "missing or incomplete documentation"

    return (
        f"Analyzed {stats.total_bank + stats.total_book} transactions and found "
        f"{stats.flagged_count} items requiring review. The main cause appears to be {cause}."
    )


def generate_analysis_report(
    items: Sequence[ReconciledItem],
    stats: ReconciliationStats,
    settings: Optional[ReconciliationSettings] = None,
    rules: Sequence[InsightRule] = INSIGHT_RULES
) -> AnalysisReport:
    """
    Build the narrative report for a reconciliation run.

    Args:
        items: All reconciled items
        stats: Statistics computed from the same items
        settings: Reconciliation settings (defaults if omitted)
        rules: Insight rule table, evaluated in order

    Returns:
        AnalysisReport with summary, insights, recommendations and distribution
    """
    metrics = build_metrics(items, stats, settings)
    fired = fired_rules(metrics, rules)

    logger.info(f"Report rules fired: {[rule.name for rule in fired]}")

    return AnalysisReport(
        summary=_summary(stats, metrics),
        insights=tuple(
            AnalysisInsight(
                type=rule.insight_type,
                title=rule.title,
                description=rule.describe(metrics)
            )
            for rule in fired
        ),
        recommendations=tuple(rule.recommendation for rule in fired if rule.recommendation),
        error_distribution=error_distribution(items, stats),
    )
