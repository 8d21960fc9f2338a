"""
Book Record Data Model
======================

Represents one entry of the internal bookkeeping ledger.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class BookRecord:
    """
    Represents an internal ledger posting.

    The free-text description doubles as the matching key, since
    bookkeepers type the bank invoice number into it.
    """

    document_no: str
    posting_date: str
    description: str
    amount: float = 0.0

    # Raw columns, kept for traceability only
    original_row: tuple[str, ...] = field(default=(), compare=False, repr=False)

    @property
    def matching_key(self) -> str:
        """Normalized key used for exact matching."""
        return self.description.strip()

    def to_dict(self) -> dict:
        """Convert to dictionary for the presentation layer."""
        return {
            "document_no": self.document_no,
            "posting_date": self.posting_date,
            "description": self.description,
            "amount": self.amount,
            "original_row": list(self.original_row),
        }
