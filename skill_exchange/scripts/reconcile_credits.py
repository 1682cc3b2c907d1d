"""
Report profiles whose stored balance differs from the sum of their ledger.

Exit status is 0 when every balance matches, 2 when drift was found.

Usage:
    python -m skill_exchange.scripts.reconcile_credits
"""

import sys

from skill_exchange.database import SessionLocal
from skill_exchange.services.credit_service import find_drifted_balances


def main() -> int:
    db = SessionLocal()
    try:
        drifted = find_drifted_balances(db)
    finally:
        db.close()

    if not drifted:
        print("All balances match the ledger.")
        return 0

    print(f"{len(drifted)} profile(s) out of balance:")
    for row in drifted:
        print(
            f"  user {row['user_id']} ({row['name']}): "
            f"stored={row['stored']} ledger={row['ledger']} "
            f"diff={row['stored'] - row['ledger']}"
        )
    return 2


if __name__ == "__main__":
    sys.exit(main())
