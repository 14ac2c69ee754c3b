"""
Multi-asset balance tracking for the two traded assets of every pool.

Implements BalanceTable[Account, AssetId] -> Amount plus spender allowances,
which is all the hook needs from a token transfer primitive.
"""

from typing import Dict, Tuple

from ..errors import InsufficientAllowance, InsufficientBalance


# Type aliases
Account = str
AssetId = str
Amount = int  # Non-negative integer (arbitrary precision)


class BalanceTable:
    """
    Balance table mapping (account, asset) -> amount, with allowances
    (owner, spender, asset) -> amount.

    Note: this class stores balances in a plain dict. Do not rely on dict
    iteration order; callers sort keys explicitly at serialization boundaries.
    """

    def __init__(self):
        """Initialize empty balance table."""
        self._balances: Dict[Tuple[Account, AssetId], Amount] = {}
        self._allowances: Dict[Tuple[Account, Account, AssetId], Amount] = {}

    def get(self, account: Account, asset: AssetId) -> Amount:
        """Get balance for (account, asset). Returns 0 if not found."""
        return self._balances.get((account, asset), 0)

    def set(self, account: Account, asset: AssetId, amount: Amount) -> None:
        """
        Set balance for (account, asset).

        Raises:
            ValueError: If amount is negative
        """
        if amount < 0:
            raise ValueError(f"Balance cannot be negative: {amount}")
        if amount == 0:
            # Remove zero balances to keep table sparse
            self._balances.pop((account, asset), None)
        else:
            self._balances[(account, asset)] = amount

    def add(self, account: Account, asset: AssetId, delta: int) -> None:
        """
        Add delta to balance (delta may be negative).

        Raises:
            InsufficientBalance: If resulting balance would be negative
        """
        current = self.get(account, asset)
        new_balance = current + delta
        if new_balance < 0:
            raise InsufficientBalance(
                f"Insufficient {asset} balance for {account}: {current} + {delta} = {new_balance} < 0"
            )
        self.set(account, asset, new_balance)

    def subtract(self, account: Account, asset: AssetId, delta: Amount) -> None:
        """Subtract a non-negative amount from a balance."""
        if delta < 0:
            raise ValueError(f"Delta must be non-negative: {delta}")
        self.add(account, asset, -delta)

    def transfer(self, sender: Account, recipient: Account, asset: AssetId, amount: Amount) -> None:
        """
        Move `amount` of `asset` from sender to recipient.

        Raises:
            ValueError: If amount is negative
            InsufficientBalance: If sender holds less than amount
        """
        if amount < 0:
            raise ValueError(f"Transfer amount must be non-negative: {amount}")
        if amount == 0:
            return
        self.subtract(sender, asset, amount)
        self.add(recipient, asset, amount)

    def allowance(self, owner: Account, spender: Account, asset: AssetId) -> Amount:
        return self._allowances.get((owner, spender, asset), 0)

    def approve(self, owner: Account, spender: Account, asset: AssetId, amount: Amount) -> None:
        """Set the amount of `asset` that `spender` may move out of `owner`."""
        if amount < 0:
            raise ValueError(f"Allowance cannot be negative: {amount}")
        if amount == 0:
            self._allowances.pop((owner, spender, asset), None)
        else:
            self._allowances[(owner, spender, asset)] = amount

    def transfer_from(
        self,
        spender: Account,
        owner: Account,
        recipient: Account,
        asset: AssetId,
        amount: Amount,
    ) -> None:
        """
        Move `amount` of `asset` from owner to recipient on behalf of spender.

        Raises:
            InsufficientAllowance: If spender's allowance is below amount
            InsufficientBalance: If owner holds less than amount
        """
        if amount < 0:
            raise ValueError(f"Transfer amount must be non-negative: {amount}")
        approved = self.allowance(owner, spender, asset)
        if approved < amount:
            raise InsufficientAllowance(
                f"Insufficient {asset} allowance for {spender} from {owner}: {approved} < {amount}"
            )
        self.transfer(owner, recipient, asset, amount)
        self.approve(owner, spender, asset, approved - amount)

    def get_all_balances(self) -> Dict[Tuple[Account, AssetId], Amount]:
        """Get all balances as a dictionary."""
        return dict(self._balances)

    def get_balances_for_asset(self, asset: AssetId) -> Dict[Account, Amount]:
        """Get all balances for a specific asset."""
        result = {}
        for (acct, a), amount in self._balances.items():
            if a == asset:
                result[acct] = amount
        return result

    def total_of(self, asset: AssetId) -> Amount:
        """Sum of all balances of `asset` (conservation checks)."""
        return sum(self.get_balances_for_asset(asset).values())

    def verify_non_negative(self) -> bool:
        """Verify all balances are non-negative."""
        return all(amount >= 0 for amount in self._balances.values())

    def snapshot(self) -> Tuple[Dict[Tuple[Account, AssetId], Amount], Dict[Tuple[Account, Account, AssetId], Amount]]:
        return dict(self._balances), dict(self._allowances)

    def restore(self, snap) -> None:
        balances, allowances = snap
        self._balances = dict(balances)
        self._allowances = dict(allowances)

    def __repr__(self) -> str:
        return f"BalanceTable({len(self._balances)} entries)"
