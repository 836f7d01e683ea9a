"""Routes exposing the ledger's create, update and delete operations."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from fintrack.core.security import get_caller_scope
from fintrack.domain.caller import CallerScope
from fintrack.schemas.transactions import TransactionCreate, TransactionRead, TransactionUpdate
from fintrack.services import LedgerService
from fintrack.web.dependencies import get_db_session, get_ledger_service

router = APIRouter(prefix="/api/transactions", tags=["transactions"])


@router.get("", response_model=list[TransactionRead])
def list_transactions(
    session: Session = Depends(get_db_session),
    caller: CallerScope = Depends(get_caller_scope),
    service: LedgerService = Depends(get_ledger_service),
) -> list[TransactionRead]:
    records = service.list_transactions(session, caller)
    return [TransactionRead.model_validate(record) for record in records]


@router.post("", response_model=TransactionRead, status_code=status.HTTP_201_CREATED)
def create_transaction(
    payload: TransactionCreate,
    session: Session = Depends(get_db_session),
    caller: CallerScope = Depends(get_caller_scope),
    service: LedgerService = Depends(get_ledger_service),
) -> TransactionRead:
    record = service.create_transaction(session, payload, caller)
    return TransactionRead.model_validate(record)


@router.patch("/{transaction_id}", response_model=TransactionRead)
def update_transaction(
    transaction_id: str,
    payload: TransactionUpdate,
    session: Session = Depends(get_db_session),
    caller: CallerScope = Depends(get_caller_scope),
    service: LedgerService = Depends(get_ledger_service),
) -> TransactionRead:
    record = service.update_transaction(session, transaction_id, payload, caller)
    return TransactionRead.model_validate(record)


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_transaction(
    transaction_id: str,
    session: Session = Depends(get_db_session),
    caller: CallerScope = Depends(get_caller_scope),
    service: LedgerService = Depends(get_ledger_service),
) -> Response:
    service.delete_transaction(session, transaction_id, caller)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
