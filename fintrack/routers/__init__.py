"""FastAPI routers for the ledger service."""

from .accounts import router as accounts_router
from .transactions import router as transactions_router

__all__ = ["accounts_router", "transactions_router"]
