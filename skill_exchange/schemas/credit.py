# skill_exchange/schemas/credit.py
"""
Credit ledger Pydantic schemas.

Amounts are stored as NUMERIC(10, 2) and handled as ``Decimal`` internally;
they are rendered as plain JSON numbers.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

CreditAmount = Annotated[
    Decimal,
    PlainSerializer(lambda value: float(value), return_type=float, when_used="json"),
]


# ======================
# BALANCE SCHEMAS
# ======================
class BalanceResponse(BaseModel):
    user_id: int = Field(..., description="User identifier")
    credits: CreditAmount = Field(..., description="Current credit balance")


# ======================
# LEDGER SCHEMAS
# ======================
class CreditTransactionResponse(BaseModel):
    """Single ledger row"""
    id: int
    amount: CreditAmount = Field(..., description="Signed amount (negative for debits)")
    type: str = Field(..., description="teaching/learning/ai_session/welcome_bonus/top_up")
    session_id: Optional[int] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# ======================
# ADMIN TOP-UP SCHEMAS
# ======================
class TopUpRequest(BaseModel):
    """Admin credit top-up request"""
    target_user_id: int = Field(..., description="User receiving credits")
    amount: Decimal = Field(..., gt=0, le=1000, max_digits=10, decimal_places=2)
    reason: Optional[str] = Field(None, max_length=200)


class TopUpResponse(BaseModel):
    user_id: int
    amount: CreditAmount
    new_balance: CreditAmount
    transaction_id: int
