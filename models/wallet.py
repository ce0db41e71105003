"""
models/wallet.py
----------------
Transaction candidates pulled from an e-wallet for import.
"""

from dataclasses import dataclass
from datetime import datetime

CATEGORY_FOOD = "food"
CATEGORY_MISC = "misc"


@dataclass
class WalletTransaction:
    """
    A wallet transaction offered for import into the weekly budget.

    Attributes:
        id: Provider-side identifier.
        description: Merchant or note.
        amount: Amount spent in dong.
        date: When it happened.
        category: 'food' or 'misc'; decides which actual total it feeds.
        is_selected: Whether the user keeps it for import.
    """
    id: str
    description: str
    amount: int
    date: datetime
    category: str  # 'food' | 'misc'
    is_selected: bool = True
