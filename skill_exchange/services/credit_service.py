# skill_exchange/services/credit_service.py
"""
Credit Economy - Business Logic Service

Balances live on ``profiles.credits``; every movement also appends one row
to ``credit_transactions`` in the same unit of work as the balance change.
Functions here flush but never commit: the calling handler owns the commit.
"""

import logging
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from skill_exchange.crud import credit as credit_crud
from skill_exchange.crud import profile as profile_crud
from skill_exchange.exceptions import NotFound
from skill_exchange.models.credit import CreditTransaction, TransactionType
from skill_exchange.models.user import Profile

logger = logging.getLogger(__name__)


# =====================================
# CONFIGURATION CONSTANTS
# =====================================

class CreditPolicy:
    """Credit economy policy configuration."""
    WELCOME_BONUS = Decimal("3")            # Balance of a freshly set-up profile
    HUMAN_SESSION_COST = Decimal("1")       # Charged to the learner on completion
    TUTOR_REWARD = Decimal("1")             # Paid to the tutor on completion
    AI_SESSION_COST = Decimal("0.5")        # Charged to the learner of an AI session
    REQUEST_MINIMUM_BALANCE = Decimal("1")  # Checked, not deducted, when sending a request
    AI_BOOKING_MINIMUM_BALANCE = AI_SESSION_COST


# =====================================
# BALANCE MOVEMENTS
# =====================================

def apply_movement(
    db: Session,
    profile: Profile,
    amount: Decimal,
    transaction_type: TransactionType,
    description: str,
    session_id: Optional[int] = None
) -> CreditTransaction:
    """
    Change a profile balance and append the matching ledger row.

    Args:
        db: Database session
        profile: Profile whose balance changes (ideally locked by the caller)
        amount: Signed amount (negative for debit)
        transaction_type: Ledger row type
        description: Ledger row label
        session_id: Optional session that caused the movement

    Returns:
        Created CreditTransaction object
    """
    profile.credits = Decimal(profile.credits) + amount
    return credit_crud.create_transaction(
        db=db,
        user_id=profile.user_id,
        amount=amount,
        transaction_type=transaction_type,
        session_id=session_id,
        description=description,
    )


def get_balance(db: Session, user_id: int) -> Decimal:
    """
    Raises:
        NotFound: If the user has no profile yet
    """
    profile = profile_crud.get_profile_by_user_id(db, user_id)
    if not profile:
        raise NotFound("Profile not found")
    return Decimal(profile.credits)


def get_history(db: Session, user_id: int, limit: int = 50) -> List[CreditTransaction]:
    return credit_crud.get_user_transactions(db, user_id, limit=limit)


def ledger_balance(db: Session, user_id: int) -> Decimal:
    """Sum of every ledger row for the user."""
    return credit_crud.sum_user_ledger(db, user_id)


# =====================================
# ADMIN TOP-UP
# =====================================

def top_up(
    db: Session,
    admin_id: int,
    target_user_id: int,
    amount: Decimal,
    reason: Optional[str] = None
) -> Dict:
    """
    Add credits to a user's balance. Commits on success.

    Args:
        db: Database session
        admin_id: Operator performing the top-up (for the audit log)
        target_user_id: User receiving credits
        amount: Positive amount
        reason: Optional label stored on the ledger row

    Returns:
        Dictionary with the new balance and the ledger row id

    Raises:
        NotFound: If the target has no profile
    """
    profile = profile_crud.get_profile_by_user_id(db, target_user_id, for_update=True)
    if not profile:
        raise NotFound("Target profile not found")

    transaction = apply_movement(
        db,
        profile,
        amount,
        TransactionType.TOP_UP,
        description=reason or "Admin top-up",
    )
    db.commit()
    db.refresh(profile)

    logger.info(
        "Admin %s topped up user %s by %s (balance now %s)",
        admin_id, target_user_id, amount, profile.credits,
    )
    return {
        "user_id": target_user_id,
        "amount": amount,
        "new_balance": Decimal(profile.credits),
        "transaction_id": transaction.id,
    }


def find_drifted_balances(db: Session) -> List[Dict]:
    """Profiles whose stored balance differs from their ledger sum."""
    drifted = []
    for profile in db.query(Profile).order_by(Profile.user_id).all():
        stored = Decimal(profile.credits)
        ledger = ledger_balance(db, profile.user_id)
        if stored != ledger:
            drifted.append({
                "user_id": profile.user_id,
                "name": profile.name,
                "stored": stored,
                "ledger": ledger,
            })
    return drifted
