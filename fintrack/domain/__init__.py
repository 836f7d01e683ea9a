"""Pure ledger domain values and arithmetic."""

from .caller import CallerScope
from .ledger import (
    LedgerEntry,
    Posting,
    booking_postings,
    replay,
    reversal_postings,
)

__all__ = [
    "CallerScope",
    "LedgerEntry",
    "Posting",
    "booking_postings",
    "replay",
    "reversal_postings",
]
