"""
Fuzzy Resolution Tool
=====================

Recovers probable pairs the exact pass missed because of data-entry
errors in the invoice number.

Each unmatched book entry tries the pairing strategies in order and
takes the first candidate that qualifies. Matching is greedy and
order-sensitive; strategies are plain callables so a different
assignment method can be swapped in.
"""

from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from aws_lambda_powertools import Logger

from models import (
    BankRecord,
    BookRecord,
    Confidence,
    ErrorType,
    MatchStatus,
    ReconciledItem,
)
from utils import ReconciliationSettings

logger = Logger()


@dataclass(frozen=True)
class FuzzyMatch:
    """A bank record proposed for a book entry by a pairing strategy."""
    bank_record: BankRecord
    confidence: Confidence
    error_type: ErrorType
    suggestion: str


@dataclass(frozen=True)
class FuzzyResolution:
    """Potential matches and what remains unmatched on each side."""
    potential_matches: tuple[ReconciledItem, ...]
    unmatched_books: tuple[BookRecord, ...]
    unmatched_banks: tuple[BankRecord, ...]


class PairingStrategy(Protocol):
    """Proposes a bank record for a book entry, or None."""

    def __call__(
        self,
        book: BookRecord,
        candidates: Sequence[BankRecord],
        settings: ReconciliationSettings
    ) -> Optional[FuzzyMatch]: ...


def edit_distance(a: str, b: str) -> int:
    """
    Levenshtein distance between two strings.

    Counts single-character inserts, deletes and substitutions.
    Case-sensitive.
    """
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))

    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            if char_a == char_b:
                current.append(previous[j - 1])
            else:
                current.append(min(
                    previous[j - 1] + 1,  # substitution
                    current[j - 1] + 1,  # insertion
                    previous[j] + 1  # deletion
                ))
        previous = current

    return previous[-1]


def amount_exact_id_fuzzy(
    book: BookRecord,
    candidates: Sequence[BankRecord],
    settings: ReconciliationSettings
) -> Optional[FuzzyMatch]:
    """Same amount, invoice number within a couple of edits (ID typo)."""
    for bank in candidates:
        if abs(bank.total_amount - book.amount) >= settings.amount_tolerance:
            continue

        if edit_distance(book.matching_key, bank.matching_key) <= settings.typo_max_distance:
            return FuzzyMatch(
                bank_record=bank,
                confidence=Confidence.HIGH,
                error_type=ErrorType.TYPO,
                suggestion=(
                    f"Amounts agree; invoice number likely mistyped "
                    f"(bank {bank.invoice_number}, book {book.description})"
                )
            )

    return None


def id_very_fuzzy_amount_mismatch(
    book: BookRecord,
    candidates: Sequence[BankRecord],
    settings: ReconciliationSettings
) -> Optional[FuzzyMatch]:
    """Different amount, invoice number a single edit away."""
    for bank in candidates:
        if abs(bank.total_amount - book.amount) <= settings.amount_tolerance:
            continue

        if edit_distance(book.matching_key, bank.matching_key) <= settings.keying_max_distance:
            return FuzzyMatch(
                bank_record=bank,
                confidence=Confidence.MEDIUM,
                error_type=ErrorType.KEYING,
                suggestion=(
                    f"Invoice number {bank.invoice_number} is nearly identical to "
                    f"{book.description}; both the amount and the ID may have been keyed wrong"
                )
            )

    return None


DEFAULT_STRATEGIES: tuple[PairingStrategy, ...] = (
    amount_exact_id_fuzzy,
    id_very_fuzzy_amount_mismatch,
)


def resolve_unmatched(
    unmatched_books: Sequence[BookRecord],
    unmatched_banks: Sequence[BankRecord],
    settings: Optional[ReconciliationSettings] = None,
    strategies: Sequence[PairingStrategy] = DEFAULT_STRATEGIES
) -> FuzzyResolution:
    """
    Attempt to pair leftover book entries with leftover bank records.

    Args:
        unmatched_books: Book residual from the exact pass, in input order
        unmatched_banks: Bank residual from the exact pass, in input order
        settings: Reconciliation settings (defaults if omitted)
        strategies: Pairing strategies, tried in order per book entry

    Returns:
        FuzzyResolution with POTENTIAL_MATCH items and remaining residuals
    """
    settings = settings or ReconciliationSettings()

    potential_matches = []
    remaining_books = []
    remaining_banks = tuple(unmatched_banks)

    for book in unmatched_books:
        match = None
        for strategy in strategies:
            match = strategy(book, remaining_banks, settings)
            if match:
                break

        if match is None:
            remaining_books.append(book)
            continue

        bank = match.bank_record
        remaining_banks = tuple(b for b in remaining_banks if b is not bank)

        logger.info(
            f"Potential match: book {book.description} -> bank {bank.invoice_number} "
            f"({match.error_type.value}, {match.confidence.value})"
        )

        potential_matches.append(ReconciledItem(
            id=f"potential-{book.document_no}",
            status=MatchStatus.POTENTIAL_MATCH,
            bank_record=bank,
            book_record=book,
            variance_amount=bank.total_amount - book.amount,
            notes="Similar record found by heuristic matching",
            suggestion=match.suggestion,
            confidence=match.confidence,
            error_type=match.error_type
        ))

    # Same-key duplicates of a paired bank record must not resurface as unmatched
    paired_keys = {item.bank_record.matching_key for item in potential_matches}
    remaining_banks = tuple(
        bank for bank in remaining_banks
        if bank.matching_key not in paired_keys
    )

    logger.info(
        f"Fuzzy pass: {len(potential_matches)} potential matches, "
        f"{len(remaining_books)} book and {len(remaining_banks)} bank records unmatched"
    )

    return FuzzyResolution(
        potential_matches=tuple(potential_matches),
        unmatched_books=tuple(remaining_books),
        unmatched_banks=remaining_banks
    )
