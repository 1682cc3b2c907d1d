# skill_exchange/crud/credit.py
"""
Credit Ledger - CRUD Operations

The ledger is append-only: rows are inserted, never updated or deleted.
"""

from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from skill_exchange.models.credit import CreditTransaction, TransactionType


def create_transaction(
    db: Session,
    user_id: int,
    amount: Decimal,
    transaction_type: TransactionType,
    session_id: Optional[int] = None,
    description: Optional[str] = None
) -> CreditTransaction:
    """
    Append a ledger row.

    Args:
        db: Database session
        user_id: Owner of the row
        amount: Signed amount (negative for debit, positive for credit)
        transaction_type: teaching/learning/ai_session/welcome_bonus/top_up
        session_id: Optional session that caused the movement
        description: Human readable label

    Returns:
        Created CreditTransaction object
    """
    transaction = CreditTransaction(
        user_id=user_id,
        amount=amount,
        type=transaction_type,
        session_id=session_id,
        description=description,
    )
    db.add(transaction)
    db.flush()  # Get transaction ID
    return transaction


def get_user_transactions(db: Session, user_id: int, limit: int = 50) -> List[CreditTransaction]:
    """
    Retrieve ledger history for a user, newest first.

    Args:
        db: Database session
        user_id: User ID
        limit: Maximum number of rows to return

    Returns:
        List of CreditTransaction objects
    """
    return (
        db.query(CreditTransaction)
        .filter(CreditTransaction.user_id == user_id)
        .order_by(CreditTransaction.created_at.desc(), CreditTransaction.id.desc())
        .limit(limit)
        .all()
    )


def get_session_transactions(db: Session, session_id: int) -> List[CreditTransaction]:
    return (
        db.query(CreditTransaction)
        .filter(CreditTransaction.session_id == session_id)
        .order_by(CreditTransaction.id)
        .all()
    )


def sum_user_ledger(db: Session, user_id: int) -> Decimal:
    total = db.query(func.sum(CreditTransaction.amount)).filter(
        CreditTransaction.user_id == user_id
    ).scalar()
    return Decimal(str(total)) if total is not None else Decimal("0")
