"""
Ledger Ingestion Tool
=====================

Parses raw comma-delimited text from the bank feed and the book ledger
into typed records.
"""

import math
from typing import Any

from aws_lambda_powertools import Logger

from models import BankRecord, BookRecord

logger = Logger()

# Minimum field count for a line to be kept
MIN_BANK_FIELDS = 5
MIN_BOOK_FIELDS = 4


class LedgerFormatError(ValueError):
    """Raised when a ledger blob cannot be read as delimited text."""


def split_csv_line(line: str) -> list[str]:
    """
    Split a delimited line into fields.

    A double quote toggles quoted mode; commas inside quotes do not
    split. Each field is trimmed and loses one surrounding quote pair.
    """
    fields = []
    start = 0
    in_quotes = False

    for i, char in enumerate(line):
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append(_clean_field(line[start:i]))
            start = i + 1

    fields.append(_clean_field(line[start:]))
    return fields


def _clean_field(value: str) -> str:
    value = value.strip()
    if value.startswith('"'):
        value = value[1:]
    if value.endswith('"'):
        value = value[:-1]
    return value.strip()


def parse_amount(value: Any) -> float:
    """
    Convert a numeric field like "1,234.56" to float.

    Empty or non-numeric input yields 0.0.
    """
    if not value:
        return 0.0

    try:
        amount = float(str(value).replace(",", ""))
    except ValueError:
        return 0.0

    return amount if math.isfinite(amount) else 0.0


def _data_lines(text: Any, ledger: str) -> list[tuple[int, list[str]]]:
    """Return (line number, fields) for every non-blank line after the header."""
    if not isinstance(text, str):
        raise LedgerFormatError(
            f"{ledger} ledger must be text, got {type(text).__name__}"
        )

    numbered = [
        (number, line)
        for number, line in enumerate(text.splitlines(), start=1)
        if line.strip()
    ]

    # First retained line is the header
    return [(number, split_csv_line(line)) for number, line in numbered[1:]]


def _column(cols: list[str], index: int) -> str:
    return cols[index] if index < len(cols) else ""


def parse_bank_csv(text: str) -> list[BankRecord]:
    """
    Parse the bank statement feed.

    Columns: account, settlement date, transaction date, time,
    invoice number, product, quantity, unit price, amount before tax,
    tax, total amount, ..., brand (always last).

    Args:
        text: Raw delimited text including a header row

    Returns:
        Bank records in input order

    Raises:
        LedgerFormatError: If text is not a string
    """
    records = []
    skipped = 0

    for number, cols in _data_lines(text, "Bank"):
        if len(cols) < MIN_BANK_FIELDS:
            skipped += 1
            logger.warning(
                f"Skipping bank line {number}: {len(cols)} fields, need {MIN_BANK_FIELDS}"
            )
            continue

        records.append(BankRecord(
            account_no=cols[0],
            settlement_date=cols[1],
            transaction_date=cols[2],
            time=cols[3],
            invoice_number=cols[4],
            product=_column(cols, 5),
            quantity=parse_amount(_column(cols, 6)),
            unit_price=parse_amount(_column(cols, 7)),
            amount_before_tax=parse_amount(_column(cols, 8)),
            tax_amount=parse_amount(_column(cols, 9)),
            total_amount=parse_amount(_column(cols, 10)),
            brand=cols[-1],
            original_row=tuple(cols)
        ))

    logger.info(f"Parsed {len(records)} bank records ({skipped} lines skipped)")
    return records


def parse_book_csv(text: str) -> list[BookRecord]:
    """
    Parse the internal book ledger.

    Columns: document number, posting date, description, amount.

    Args:
        text: Raw delimited text including a header row

    Returns:
        Book records in input order

    Raises:
        LedgerFormatError: If text is not a string
    """
    records = []
    skipped = 0

    for number, cols in _data_lines(text, "Book"):
        if len(cols) < MIN_BOOK_FIELDS:
            skipped += 1
            logger.warning(
                f"Skipping book line {number}: {len(cols)} fields, need {MIN_BOOK_FIELDS}"
            )
            continue

        records.append(BookRecord(
            document_no=cols[0],
            posting_date=cols[1],
            description=cols[2],
            amount=parse_amount(cols[3]),
            original_row=tuple(cols)
        ))

    logger.info(f"Parsed {len(records)} book records ({skipped} lines skipped)")
    return records
