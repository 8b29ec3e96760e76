"""
Single-token balance tracking for wallets and custody accounts.

Implements TokenLedger[Account] -> Amount. Accounts are plain strings:
participant identities for wallets, and `custody:*` names for pool custody
(see `locked_staking.core.staking.types`).
"""

from typing import Dict, Iterable

from ..core.staking.errors import InsufficientBalance
from ..core.staking.types import Transfer


# Type aliases
Account = str
Amount = int  # Non-negative integer (arbitrary precision)


class TokenLedger:
    """
    Deterministic balance table mapping account -> amount for one token.

    Note: this class stores balances in a plain dict. Do not rely on dict
    iteration order; callers should sort keys explicitly at serialization /
    hashing boundaries (see `locked_staking.integration.pool_snapshot`).
    """

    def __init__(self, token: str, balances: Dict[Account, Amount] | None = None):
        """Initialize a ledger for `token`, optionally seeded with balances."""
        self.token = token
        self._balances: Dict[Account, Amount] = {}
        for account, amount in (balances or {}).items():
            self.set(account, amount)

    def get(self, account: Account) -> Amount:
        """Get balance for account. Returns 0 if not found."""
        return self._balances.get(account, 0)

    def set(self, account: Account, amount: Amount) -> None:
        """
        Set balance for account.

        Raises:
            ValueError: If amount is negative
        """
        if amount < 0:
            raise ValueError(f"Balance cannot be negative: {amount}")
        if amount == 0:
            # Remove zero balances to keep table sparse
            self._balances.pop(account, None)
        else:
            self._balances[account] = amount

    def credit(self, account: Account, amount: Amount) -> None:
        """Mint `amount` into `account` (test funding, bridge deposits)."""
        if amount < 0:
            raise ValueError(f"Credit must be non-negative: {amount}")
        self.set(account, self.get(account) + amount)

    def transfer(self, source: Account, destination: Account, amount: Amount) -> None:
        """
        Move `amount` from `source` to `destination`.

        Raises:
            ValueError: If amount is negative
            InsufficientBalance: If `source` holds less than `amount`
        """
        if amount < 0:
            raise ValueError(f"Transfer amount must be non-negative: {amount}")
        current = self.get(source)
        if current < amount:
            raise InsufficientBalance(
                f"Insufficient balance in {source}: {current} < {amount}"
            )
        self.set(source, current - amount)
        self.set(destination, self.get(destination) + amount)

    def apply(self, transfers: Iterable[Transfer]) -> None:
        """Apply transfers in order; the first failing one raises."""
        for t in transfers:
            self.transfer(t.source, t.destination, t.amount)

    def copy(self) -> "TokenLedger":
        return TokenLedger(self.token, dict(self._balances))

    def get_all_balances(self) -> Dict[Account, Amount]:
        """Non-zero balances only (the table is sparse)."""
        return dict(self._balances)

    def __repr__(self) -> str:
        return f"TokenLedger({self.token!r}, {len(self._balances)} entries)"
