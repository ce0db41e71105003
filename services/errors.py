"""
services/errors.py
------------------
Domain errors raised by the ledger and services.
Handlers never see these: services turn them into user messages.
"""


class BudgetError(Exception):
    """Base class for recoverable budgeting errors."""


class InvalidAmountError(BudgetError):
    """A payment, withdrawal or log amount that is not strictly positive."""

    def __init__(self, amount: float):
        self.amount = amount
        super().__init__(f"Amount must be positive, got {amount}")


class InsufficientPaidBalanceError(BudgetError):
    """A withdrawal larger than what has been paid into the debt."""

    def __init__(self, requested: int, available: int):
        self.requested = requested
        self.available = available
        super().__init__(f"Cannot withdraw {requested}, only {available} paid in")


class DebtNotFoundError(BudgetError):
    """No debt with this id in the session."""

    def __init__(self, debt_id: str):
        self.debt_id = debt_id
        super().__init__(f"Debt {debt_id!r} not found")


class WalletNotConnectedError(BudgetError):
    """Wallet sync requested before the wallet was linked."""

    pass
