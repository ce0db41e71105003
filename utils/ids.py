"""
utils/ids.py
------------
Opaque identifiers for debts, ledger entries and logs.
"""

import uuid


def new_id() -> str:
    """Return a short random hex id, easy to type in a chat command."""
    return uuid.uuid4().hex[:8]
