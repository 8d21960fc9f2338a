"""
Reconciliation Engine Tests
===========================

End-to-end tests for the parse → match → fuzzy → report pipeline.

Usage:
    pytest tests/test_engine.py -v
"""

from collections import Counter

import pytest

from engine import reconcile, reconcile_records
from models import Confidence, ErrorType, InsightType, MatchStatus
from tools.ingestion import LedgerFormatError
from ledger_samples import BANK_HEADER, BOOK_HEADER


def _statuses(result):
    return [item.status for item in result.items]


class TestScenarios:
    """Reference reconciliation scenarios."""

    def test_exact_match(self, make_bank, make_book):
        result = reconcile_records([make_bank("INV001", 1000.00)], [make_book("INV001", 1000.00)])

        assert _statuses(result) == [MatchStatus.MATCHED]
        assert result.items[0].variance_amount == 0.0

    def test_transposition_variance(self, make_bank, make_book):
        result = reconcile_records([make_bank("INV002", 5400.00)], [make_book("INV002", 4500.00)])

        item = result.items[0]
        assert item.status == MatchStatus.VARIANCE
        assert item.variance_amount == pytest.approx(900.00)
        assert item.error_type == ErrorType.TRANSPOSITION
        assert item.confidence == Confidence.HIGH

    def test_typo_recovered_as_potential_match(self, make_bank, make_book):
        result = reconcile_records([make_bank("INV003", 2000.00)], [make_book("INV0O3", 2000.00)])

        item = result.items[0]
        assert _statuses(result) == [MatchStatus.POTENTIAL_MATCH]
        assert item.confidence == Confidence.HIGH
        assert item.error_type == ErrorType.TYPO

    def test_typo_recovered_with_padded_bank_key(self, make_bank, make_book):
        result = reconcile_records([make_bank(" INV003 ", 2000.00)], [make_book("INV0O3", 2000.00)])

        assert _statuses(result) == [MatchStatus.POTENTIAL_MATCH]
        assert result.items[0].error_type == ErrorType.TYPO

    def test_bank_only_record(self, make_bank, make_book):
        result = reconcile_records(
            [make_bank("INV001", 10.00), make_bank("INV004", 999.00)],
            [make_book("INV001", 10.00)]
        )

        assert _statuses(result) == [MatchStatus.MATCHED, MatchStatus.UNMATCHED_BANK]
        item = result.items[1]
        assert item.id == "missing-book-INV004"
        assert item.book_record is None
        assert item.error_type == ErrorType.MISSING

    def test_empty_book_ledger(self, make_bank):
        banks = [make_bank("INV001", 10.00), make_bank("INV002", 20.00)]

        result = reconcile_records(banks, [])

        assert _statuses(result) == [MatchStatus.UNMATCHED_BANK] * 2
        assert result.stats.match_rate == 0.0
        assert result.report.insights[0].type == InsightType.CRITICAL

    def test_book_only_record(self, make_book):
        result = reconcile_records([], [make_book("INV777", 10.00, "JV-7")])

        item = result.items[0]
        assert item.status == MatchStatus.UNMATCHED_BOOK
        assert item.id == "missing-bank-JV-7"
        assert item.bank_record is None
        assert result.stats.match_rate is None
        assert result.report.insights == ()

    def test_empty_inputs(self):
        result = reconcile_records([], [])

        assert result.items == ()
        assert result.stats.total_items == 0


class TestReconcileText:
    """Tests for reconciling raw ledger text."""

    def test_full_run(self, bank_csv, book_csv):
        result = reconcile(bank_csv, book_csv)

        assert _statuses(result) == [
            MatchStatus.MATCHED,
            MatchStatus.VARIANCE,
            MatchStatus.POTENTIAL_MATCH,
            MatchStatus.UNMATCHED_BOOK,
            MatchStatus.UNMATCHED_BANK,
        ]
        assert [item.id for item in result.items] == [
            "match-JV-001",
            "var-JV-002",
            "potential-JV-003",
            "missing-bank-JV-004",
            "missing-book-INV004",
        ]

        stats = result.stats
        assert stats.total_bank == 4
        assert stats.total_book == 4
        assert stats.total_bank_amount == pytest.approx(9150.25)
        assert stats.total_book_amount == pytest.approx(7810.00)
        assert stats.match_rate == pytest.approx(25.0)

        report = result.report
        assert [i.type for i in report.insights] == [
            InsightType.CRITICAL,
            InsightType.WARNING,
            InsightType.INFO,
        ]
        assert len(report.recommendations) == 2
        assert "8 transactions" in report.summary
        assert "4 items requiring review" in report.summary
        assert [b.value for b in report.error_distribution] == [1, 1, 1, 1]

    def test_empty_book_text(self, bank_csv):
        result = reconcile(bank_csv, BOOK_HEADER)

        assert _statuses(result) == [MatchStatus.UNMATCHED_BANK] * 4
        assert result.stats.match_rate == 0.0

    def test_non_text_input_raises(self, bank_csv):
        with pytest.raises(LedgerFormatError):
            reconcile(bank_csv, None)

    def test_result_serializes(self, bank_csv, book_csv):
        data = reconcile(bank_csv, book_csv).to_dict()

        assert data["items"][0]["status"] == "MATCHED"
        assert data["items"][1]["confidence"] == "High"
        assert data["items"][3]["bank_record"] is None
        assert data["stats"]["matched_count"] == 1
        assert data["report"]["error_distribution"][0] == {"name": "Digit Transposition", "value": 1}


class TestInvariants:
    """Properties that hold for every reconciliation."""

    @pytest.fixture
    def messy_ledgers(self, make_bank, make_book):
        banks = [
            make_bank("INV001", 100.00),
            make_bank("INV002", 200.00),
            make_bank("INV002", 250.00),
            make_bank("INV010", 300.00),
            make_bank("INV011", 410.00),
            make_bank("INV020", 50.00),
            make_bank("INV030", 60.00),
        ]
        books = [
            make_book("INV001", 100.00),
            make_book("INV002", 250.00),
            make_book("INV01O", 300.00),
            make_book("INV012", 400.00),
            make_book("INV013", 400.00),
            make_book("INV999", 1.00),
        ]
        return banks, books

    def test_every_book_record_appears_once(self, messy_ledgers):
        banks, books = messy_ledgers

        result = reconcile_records(banks, books)

        seen = Counter(id(item.book_record) for item in result.items if item.book_record)
        assert sorted(seen) == sorted(id(book) for book in books)
        assert set(seen.values()) == {1}

    def test_bank_records_appear_at_most_once(self, messy_ledgers):
        banks, books = messy_ledgers

        result = reconcile_records(banks, books)

        seen = Counter(id(item.bank_record) for item in result.items if item.bank_record)
        assert set(seen.values()) == {1}
        # Only the superseded INV002 duplicate is absent
        assert len(seen) == len(banks) - 1

    def test_status_counts_sum_to_items(self, messy_ledgers):
        banks, books = messy_ledgers

        result = reconcile_records(banks, books)

        assert result.stats.total_items == len(result.items)

    def test_variance_amounts(self, messy_ledgers):
        banks, books = messy_ledgers

        result = reconcile_records(banks, books)

        for item in result.items_with_status(MatchStatus.MATCHED):
            assert item.variance_amount == 0.0
        for item in result.items_with_status(MatchStatus.VARIANCE):
            assert abs(item.variance_amount) >= 0.01

    def test_deterministic(self, messy_ledgers):
        banks, books = messy_ledgers

        assert reconcile_records(banks, books) == reconcile_records(banks, books)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
