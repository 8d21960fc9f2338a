"""
Bank Record Data Model
======================

Represents one line of the bank-side feed (source of truth).
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class BankRecord:
    """
    Represents a bank statement line.

    Created once per valid input line during ingestion and never
    modified afterwards. The invoice number is the matching key used
    to join against the book side.
    """

    # Account and timing
    account_no: str
    settlement_date: str
    transaction_date: str
    time: str

    # Matching key
    invoice_number: str

    # Line detail
    product: str = ""
    quantity: float = 0.0
    unit_price: float = 0.0

    # Amounts
    amount_before_tax: float = 0.0
    tax_amount: float = 0.0
    total_amount: float = 0.0

    # Trailing brand tag (always the last column of the line)
    brand: str = ""

    # Raw columns, kept for traceability only
    original_row: tuple[str, ...] = field(default=(), compare=False, repr=False)

    @property
    def matching_key(self) -> str:
        """Normalized key used for exact matching."""
        return self.invoice_number.strip()

    def to_dict(self) -> dict:
        """Convert to dictionary for the presentation layer."""
        return {
            "account_no": self.account_no,
            "settlement_date": self.settlement_date,
            "transaction_date": self.transaction_date,
            "time": self.time,
            "invoice_number": self.invoice_number,
            "product": self.product,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "amount_before_tax": self.amount_before_tax,
            "tax_amount": self.tax_amount,
            "total_amount": self.total_amount,
            "brand": self.brand,
            "original_row": list(self.original_row),
        }
