"""
Reconciliation Engine
=====================

Pure pipeline that reconciles a bank feed against the book ledger.

Steps:
1. Parse both ledgers into typed records
2. Exact invoice-number matching with variance classification
3. Fuzzy resolution of what the exact pass left over
4. Finalize remaining records as unmatched
5. Compute statistics and the analysis report
"""

from typing import Optional, Sequence

from aws_lambda_powertools import Logger

from models import (
    BankRecord,
    BookRecord,
    ErrorType,
    MatchStatus,
    ReconciledItem,
    ReconciliationResult,
)
from utils import ReconciliationSettings
from tools import (
    compute_stats,
    generate_analysis_report,
    match_exact,
    parse_bank_csv,
    parse_book_csv,
    resolve_unmatched,
)

logger = Logger()


def _unmatched_book_item(book: BookRecord) -> ReconciledItem:
    return ReconciledItem(
        id=f"missing-bank-{book.document_no}",
        status=MatchStatus.UNMATCHED_BOOK,
        book_record=book,
        notes="Not found in the bank statement",
        error_type=ErrorType.MISSING
    )


def _unmatched_bank_item(bank: BankRecord) -> ReconciledItem:
    return ReconciledItem(
        id=f"missing-book-{bank.invoice_number}",
        status=MatchStatus.UNMATCHED_BANK,
        bank_record=bank,
        notes="Not recorded in the book ledger",
        error_type=ErrorType.MISSING
    )


def reconcile_records(
    bank_records: Sequence[BankRecord],
    book_records: Sequence[BookRecord],
    settings: Optional[ReconciliationSettings] = None
) -> ReconciliationResult:
    """
    Reconcile already-parsed records.

    Args:
        bank_records: Bank feed records in input order
        book_records: Book ledger records in input order
        settings: Reconciliation settings (defaults if omitted)

    Returns:
        ReconciliationResult with items, stats and report
    """
    settings = settings or ReconciliationSettings()

    exact = match_exact(bank_records, book_records, settings)
    fuzzy = resolve_unmatched(exact.unmatched_books, exact.unmatched_banks, settings)

    items = (
        exact.items
        + fuzzy.potential_matches
        + tuple(_unmatched_book_item(book) for book in fuzzy.unmatched_books)
        + tuple(_unmatched_bank_item(bank) for bank in fuzzy.unmatched_banks)
    )

    stats = compute_stats(bank_records, book_records, items)
    report = generate_analysis_report(items, stats, settings)

    logger.info(
        f"Reconciled {stats.total_bank} bank and {stats.total_book} book records: "
        f"{stats.matched_count} matched, {stats.flagged_count} flagged"
    )

    return ReconciliationResult(items=items, stats=stats, report=report)


def reconcile(
    bank_text: str,
    book_text: str,
    settings: Optional[ReconciliationSettings] = None
) -> ReconciliationResult:
    """
    Parse two raw ledger blobs and reconcile them.

    Raises:
        LedgerFormatError: If either blob is not text
    """
    bank_records = parse_bank_csv(bank_text)
    book_records = parse_book_csv(book_text)
    return reconcile_records(bank_records, book_records, settings)
