"""
Exact-Key Matching Tool
=======================

Joins book entries to bank records on the invoice number and flags
amount variances on matched pairs.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from aws_lambda_powertools import Logger

from models import BankRecord, BookRecord, MatchStatus, ReconciledItem
from utils import ReconciliationSettings

from .error_classification import classify_variance

logger = Logger()


@dataclass(frozen=True)
class ExactMatchOutcome:
    """Items from the exact pass and the residual sets left for fuzzy matching."""
    items: tuple[ReconciledItem, ...]
    unmatched_books: tuple[BookRecord, ...]
    unmatched_banks: tuple[BankRecord, ...]
    consumed_keys: frozenset[str]


def index_bank_records(bank_records: Sequence[BankRecord]) -> dict[str, BankRecord]:
    """
    Index bank records by matching key.

    On duplicate keys the last record wins; earlier ones are logged
    and dropped from exact matching.
    """
    index: dict[str, BankRecord] = {}

    for record in bank_records:
        key = record.matching_key
        if key in index:
            logger.warning(
                f"Duplicate bank invoice number {key}; keeping the later record",
                extra={"superseded_row": list(index[key].original_row)}
            )
        index[key] = record

    return index


def match_exact(
    bank_records: Sequence[BankRecord],
    book_records: Sequence[BookRecord],
    settings: Optional[ReconciliationSettings] = None
) -> ExactMatchOutcome:
    """
    Match book entries to bank records by invoice number.

    Book records are visited in input order. A hit with equal amounts
    (within tolerance) is MATCHED with zero variance; otherwise the pair
    is classified and emitted as VARIANCE.

    Args:
        bank_records: Parsed bank feed
        book_records: Parsed book ledger
        settings: Reconciliation settings (defaults if omitted)

    Returns:
        ExactMatchOutcome with items and residual sets
    """
    settings = settings or ReconciliationSettings()
    index = index_bank_records(bank_records)

    items = []
    unmatched_books = []
    consumed = set()

    for book in book_records:
        bank = index.get(book.matching_key)

        if bank is None:
            unmatched_books.append(book)
            continue

        consumed.add(bank.matching_key)
        variance = bank.total_amount - book.amount

        if abs(variance) < settings.amount_tolerance:
            items.append(ReconciledItem(
                id=f"match-{book.document_no}",
                status=MatchStatus.MATCHED,
                bank_record=bank,
                book_record=book,
                variance_amount=0.0,
                notes="Bank and book records agree"
            ))
            continue

        classification = classify_variance(bank.total_amount, book.amount, settings)
        logger.info(
            f"Variance on {bank.matching_key}: {variance:.2f} "
            f"({classification.error_type.value}, {classification.confidence.value})"
        )

        items.append(ReconciledItem(
            id=f"var-{book.document_no}",
            status=MatchStatus.VARIANCE,
            bank_record=bank,
            book_record=book,
            variance_amount=variance,
            notes="Invoice number matches but amounts differ",
            suggestion=classification.suggestion,
            confidence=classification.confidence,
            error_type=classification.error_type
        ))

    unmatched_banks = tuple(
        bank for bank in bank_records
        if bank.matching_key not in consumed
    )

    logger.info(
        f"Exact pass: {len(items)} pairs, {len(unmatched_books)} book and "
        f"{len(unmatched_banks)} bank records left unmatched"
    )

    return ExactMatchOutcome(
        items=tuple(items),
        unmatched_books=tuple(unmatched_books),
        unmatched_banks=unmatched_banks,
        consumed_keys=frozenset(consumed)
    )
