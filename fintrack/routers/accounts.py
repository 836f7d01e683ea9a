"""Routes for opening and listing finance accounts."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from fintrack.core.security import get_caller_scope
from fintrack.domain.caller import CallerScope
from fintrack.schemas.accounts import AccountCreate, AccountRead
from fintrack.services import AccountsService
from fintrack.web.dependencies import get_accounts_service, get_db_session

router = APIRouter(prefix="/api/accounts", tags=["accounts"])


@router.get("", response_model=list[AccountRead])
def list_accounts(
    session: Session = Depends(get_db_session),
    caller: CallerScope = Depends(get_caller_scope),
    service: AccountsService = Depends(get_accounts_service),
) -> list[AccountRead]:
    return [AccountRead.model_validate(account) for account in service.list_accounts(session, caller)]


@router.post("", response_model=AccountRead, status_code=status.HTTP_201_CREATED)
def create_account(
    payload: AccountCreate,
    session: Session = Depends(get_db_session),
    caller: CallerScope = Depends(get_caller_scope),
    service: AccountsService = Depends(get_accounts_service),
) -> AccountRead:
    account = service.create_account(session, payload, caller)
    return AccountRead.model_validate(account)
