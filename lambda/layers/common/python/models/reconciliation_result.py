"""
Reconciliation Result Data Model
================================

Represents the output of a ledger reconciliation run: the per-record
items, aggregate statistics and the narrative analysis report.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .bank_record import BankRecord
from .book_record import BookRecord


class MatchStatus(str, Enum):
    """Reconciliation outcome for a single item."""
    MATCHED = "MATCHED"  # Same key, amounts equal
    VARIANCE = "VARIANCE"  # Same key, amounts differ
    POTENTIAL_MATCH = "POTENTIAL_MATCH"  # Recovered by the fuzzy pass
    UNMATCHED_BANK = "UNMATCHED_BANK"  # Exists in bank feed only
    UNMATCHED_BOOK = "UNMATCHED_BOOK"  # Exists in book ledger only


class Confidence(str, Enum):
    """Qualitative strength of a heuristic match or classification."""
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class ErrorType(str, Enum):
    """Probable cause of a mismatch."""
    TRANSPOSITION = "TRANSPOSITION"
    ROUNDING = "ROUNDING"
    KEYING = "KEYING"
    TYPO = "TYPO"
    MISSING = "MISSING"
    UNKNOWN = "UNKNOWN"


class InsightType(str, Enum):
    """Severity tag of a narrative insight."""
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    INFO = "INFO"
    CRITICAL = "CRITICAL"


@dataclass(frozen=True)
class ReconciledItem:
    """
    Atomic reconciliation output.

    One item per book record, plus one per bank record left unmatched
    after both matching passes.
    """

    id: str
    status: MatchStatus
    bank_record: Optional[BankRecord] = None
    book_record: Optional[BookRecord] = None
    variance_amount: Optional[float] = None
    notes: str = ""

    # Heuristic fields
    suggestion: Optional[str] = None
    confidence: Optional[Confidence] = None
    error_type: Optional[ErrorType] = None

    def __post_init__(self) -> None:
        if self.bank_record is None and self.book_record is None:
            raise ValueError(f"Reconciled item {self.id} needs a bank or book record")

    def to_dict(self) -> dict:
        """Convert to dictionary for the presentation layer."""
        return {
            "id": self.id,
            "status": self.status.value,
            "bank_record": self.bank_record.to_dict() if self.bank_record else None,
            "book_record": self.book_record.to_dict() if self.book_record else None,
            "variance_amount": self.variance_amount,
            "notes": self.notes,
            "suggestion": self.suggestion,
            "confidence": self.confidence.value if self.confidence else None,
            "error_type": self.error_type.value if self.error_type else None,
        }


@dataclass(frozen=True)
class ReconciliationStats:
    """Aggregate counts and totals for a reconciliation run."""

    total_bank: int = 0
    total_book: int = 0
    total_bank_amount: float = 0.0
    total_book_amount: float = 0.0
    matched_count: int = 0
    variance_count: int = 0
    potential_match_count: int = 0
    unmatched_bank_count: int = 0
    unmatched_book_count: int = 0

    @property
    def match_rate(self) -> Optional[float]:
        """Matched items as a percentage of bank records, None without bank records."""
        if self.total_bank == 0:
            return None
        return self.matched_count / self.total_bank * 100

    @property
    def flagged_count(self) -> int:
        """Items that need human review."""
        return (
            self.variance_count
            + self.potential_match_count
            + self.unmatched_bank_count
            + self.unmatched_book_count
        )

    @property
    def total_items(self) -> int:
        """Sum of all per-status counts."""
        return self.matched_count + self.flagged_count

    def to_dict(self) -> dict:
        return {
            "total_bank": self.total_bank,
            "total_book": self.total_book,
            "total_bank_amount": self.total_bank_amount,
            "total_book_amount": self.total_book_amount,
            "matched_count": self.matched_count,
            "variance_count": self.variance_count,
            "potential_match_count": self.potential_match_count,
            "unmatched_bank_count": self.unmatched_bank_count,
            "unmatched_book_count": self.unmatched_book_count,
            "match_rate": self.match_rate,
        }


@dataclass(frozen=True)
class AnalysisInsight:
    """A single narrative finding."""
    type: InsightType
    title: str
    description: str


@dataclass(frozen=True)
class ErrorBucket:
    """One slice of the error-type distribution."""
    name: str
    value: int


@dataclass(frozen=True)
class AnalysisReport:
    """Narrative report derived from the reconciled items."""

    summary: str
    insights: tuple[AnalysisInsight, ...] = ()
    recommendations: tuple[str, ...] = ()
    error_distribution: tuple[ErrorBucket, ...] = ()

    def to_dict(self) -> dict:
        return {
            "summary": self.summary,
            "insights": [
                {
                    "type": i.type.value,
                    "title": i.title,
                    "description": i.description
                }
                for i in self.insights
            ],
            "recommendations": list(self.recommendations),
            "error_distribution": [
                {"name": b.name, "value": b.value}
                for b in self.error_distribution
            ],
        }


@dataclass(frozen=True)
class ReconciliationResult:
    """
    Complete result of a reconciliation run.

    This is the only structure handed to the presentation layer.
    """

    items: tuple[ReconciledItem, ...]
    stats: ReconciliationStats
    report: AnalysisReport

    def items_with_status(self, status: MatchStatus) -> list[ReconciledItem]:
        """Get items carrying the given status, in output order."""
        return [item for item in self.items if item.status == status]

    def to_dict(self) -> dict:
        """Convert to dictionary for the API response."""
        return {
            "items": [item.to_dict() for item in self.items],
            "stats": self.stats.to_dict(),
            "report": self.report.to_dict(),
        }

    def to_summary(self) -> str:
        """Generate human-readable summary."""
        lines = [
            f"Bank Records: {self.stats.total_bank} ({self.stats.total_bank_amount:,.2f})",
            f"Book Records: {self.stats.total_book} ({self.stats.total_book_amount:,.2f})",
            f"Matched: {self.stats.matched_count}",
            f"Variances: {self.stats.variance_count}",
            f"Potential Matches: {self.stats.potential_match_count}",
            f"Unmatched Bank: {self.stats.unmatched_bank_count}",
            f"Unmatched Book: {self.stats.unmatched_book_count}",
        ]

        if self.stats.match_rate is not None:
            lines.append(f"Match Rate: {self.stats.match_rate:.1f}%")

        lines.append(self.report.summary)

        return "\n".join(lines)
