# skill_exchange/api/credits.py
"""
Credits API Router

Endpoints:
- GET /credits/balance - Current user's credit balance
- GET /credits/transactions - Ledger history, newest first
- POST /credits/admin/top-up - Admin credit top-up
"""

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from skill_exchange.api.errors import service_errors
from skill_exchange.database import get_db
from skill_exchange.models.user import User
from skill_exchange.schemas.credit import (
    BalanceResponse,
    CreditTransactionResponse,
    TopUpRequest,
    TopUpResponse,
)
from skill_exchange.services import credit_service
from skill_exchange.utils.security import get_current_user, require_admin

router = APIRouter(prefix="/credits", tags=["credits"])


# ======================
# BALANCE
# ======================
@router.get("/balance", response_model=BalanceResponse)
def get_my_balance(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    with service_errors(db, "loading balance"):
        return {
            "user_id": current_user.id,
            "credits": credit_service.get_balance(db, current_user.id),
        }


# ======================
# TRANSACTION HISTORY
# ======================
@router.get("/transactions", response_model=List[CreditTransactionResponse])
def get_my_transactions(
    limit: int = Query(50, ge=1, le=100, description="Number of transactions to return"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Ledger rows for the current user.

    Amounts are signed: debits (learning, ai_session) are negative, credits
    (teaching, welcome_bonus, top_up) are positive.
    """
    return [
        CreditTransactionResponse(
            id=t.id,
            amount=t.amount,
            type=t.type.value,
            session_id=t.session_id,
            description=t.description,
            created_at=t.created_at,
        )
        for t in credit_service.get_history(db, current_user.id, limit=limit)
    ]


# ======================
# ADMIN TOP-UP
# ======================
@router.post("/admin/top-up", response_model=TopUpResponse)
def admin_top_up(
    payload: TopUpRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    with service_errors(db, "topping up credits"):
        return credit_service.top_up(
            db,
            admin_id=admin.id,
            target_user_id=payload.target_user_id,
            amount=payload.amount,
            reason=payload.reason,
        )
