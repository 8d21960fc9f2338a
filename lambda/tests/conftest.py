"""
Shared fixtures for the reconciliation tests.
"""

import os
from dataclasses import dataclass

import pytest

# Powertools reads these at import time
os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "ledger-reconciliation")
os.environ.setdefault("POWERTOOLS_METRICS_NAMESPACE", "LedgerReconciliation")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "true")

from models import BankRecord, BookRecord  # noqa: E402
from utils import ReconciliationSettings, clear_settings_cache  # noqa: E402
from ledger_samples import BANK_HEADER, BOOK_HEADER, bank_line, book_line  # noqa: E402


@pytest.fixture
def settings():
    return ReconciliationSettings()


@pytest.fixture
def make_bank():
    """Factory for bank records keyed by invoice number and total."""
    def _make(invoice: str, total: float, **kwargs) -> BankRecord:
        return BankRecord(
            account_no=kwargs.pop("account_no", "ACC-01"),
            settlement_date=kwargs.pop("settlement_date", "2025-01-05"),
            transaction_date=kwargs.pop("transaction_date", "2025-01-04"),
            time=kwargs.pop("time", "10:15"),
            invoice_number=invoice,
            total_amount=total,
            **kwargs
        )
    return _make


@pytest.fixture
def make_book():
    """Factory for book records keyed by description and amount."""
    counter = {"n": 0}

    def _make(description: str, amount: float, document_no: str = None) -> BookRecord:
        counter["n"] += 1
        return BookRecord(
            document_no=document_no or f"JV-{counter['n']:03d}",
            posting_date="2025-01-05",
            description=description,
            amount=amount
        )
    return _make


@pytest.fixture
def bank_csv():
    """Bank feed covering every reconciliation outcome."""
    return "\n".join([
        BANK_HEADER,
        bank_line("INV001", "1,000.00"),
        bank_line("INV002", "5,400.00"),
        bank_line("INV003", "2,000.00"),
        bank_line("INV004", "750.25"),
    ])


@pytest.fixture
def book_csv():
    """Book ledger matching bank_csv with one variance, one typo and one gap."""
    return "\n".join([
        BOOK_HEADER,
        book_line("JV-001", "INV001", "1,000.00"),
        book_line("JV-002", "INV002", "4,500.00"),
        book_line("JV-003", "INV0O3", "2,000.00"),
        book_line("JV-004", "INV999", "310.00"),
    ])


@dataclass
class FakeLambdaContext:
    function_name: str = "reconcile-ledgers"
    memory_limit_in_mb: int = 256
    invoked_function_arn: str = "arn:aws:lambda:us-east-1:123456789012:function:reconcile-ledgers"
    aws_request_id: str = "52fdfc07-2182-154f-163f-5f0f9a621d72"


@pytest.fixture
def lambda_context():
    return FakeLambdaContext()


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    clear_settings_cache()
    yield
    clear_settings_cache()
