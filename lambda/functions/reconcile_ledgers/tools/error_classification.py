"""
Error Classification Tool
=========================

Infers the probable cause of an amount mismatch between a bank total
and a book amount from numeric patterns alone.
"""

from dataclasses import dataclass
from typing import Optional

from models import Confidence, ErrorType
from utils import ReconciliationSettings


@dataclass(frozen=True)
class Classification:
    """Probable cause of a variance."""
    suggestion: str
    confidence: Confidence
    error_type: ErrorType


def _digits(amount: float) -> str:
    return f"{amount:.2f}".replace(".", "")


def is_transposition(first: float, second: float) -> bool:
    """Check if two amounts use the same digits (e.g. 5400.00 vs 4500.00)."""
    return sorted(_digits(first)) == sorted(_digits(second))


def _is_multiple_of(value: float, divisor: int) -> bool:
    # Compare in cents so float noise like 9.000000000000004 still counts
    return round(value * 100) % (divisor * 100) == 0


def classify_variance(
    bank_total: float,
    book_amount: float,
    settings: Optional[ReconciliationSettings] = None
) -> Classification:
    """
    Classify a mismatched pair.

    Rules are evaluated in order and the first hit wins:
    transposition, keying (off by 1000 or 100), rounding (< 1.0),
    then unknown.

    Args:
        bank_total: Total amount on the bank record
        book_amount: Amount on the book record
        settings: Reconciliation settings (defaults if omitted)

    Returns:
        Classification with suggestion, confidence and error type
    """
    settings = settings or ReconciliationSettings()
    variance = bank_total - book_amount
    abs_variance = abs(variance)

    if (
        is_transposition(bank_total, book_amount)
        and _is_multiple_of(abs_variance, settings.transposition_divisor)
    ):
        return Classification(
            suggestion=f"Transposed digits detected; the correct amount is {bank_total:.2f}",
            confidence=Confidence.HIGH,
            error_type=ErrorType.TRANSPOSITION
        )

    if any(
        abs(abs_variance - keyed) < settings.amount_tolerance
        for keyed in settings.keying_amounts
    ):
        return Classification(
            suggestion="Difference is a round magnitude; likely a keying error during data entry",
            confidence=Confidence.MEDIUM,
            error_type=ErrorType.KEYING
        )

    if abs_variance < settings.rounding_threshold:
        return Classification(
            suggestion="Small difference, likely a rounding difference",
            confidence=Confidence.HIGH,
            error_type=ErrorType.ROUNDING
        )

    return Classification(
        suggestion=f"Book amount does not match bank (difference {variance:.2f})",
        confidence=Confidence.LOW,
        error_type=ErrorType.UNKNOWN
    )
