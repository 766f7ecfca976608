"""Wallet ledger: the only code path that changes a wallet balance.

Every balance change is a signed transaction prepended to the wallet history, so the balance always equals the sum of
the recorded amounts. DEPOSIT and EARNING entries are positive, PAYMENT entries negative.
"""

from karirkita.core.errors import ValidationError
from karirkita.core.models import PaymentMethod, Transaction, TransactionType, Wallet
from karirkita.core.utils import get_logger, new_id, utcnow_iso

logger = get_logger("karirkita.ledger")

_CREDIT_TYPES = frozenset({TransactionType.DEPOSIT, TransactionType.EARNING})


def apply_transaction(wallet: Wallet, tx_type: TransactionType, amount: int, description: str) -> Transaction:
    """Apply a signed transaction to the wallet and return the recorded entry.

    Raises ValidationError without touching the wallet when the amount is zero or its sign does not match the type.
    """
    if amount == 0:
        msg = f"Refusing zero-amount {tx_type.value} transaction"
        raise ValidationError(msg)
    if (tx_type in _CREDIT_TYPES) != (amount > 0):
        msg = f"Amount {amount} has the wrong sign for a {tx_type.value} transaction"
        raise ValidationError(msg)
    tx = Transaction(id=new_id(), type=tx_type, amount=amount, date=utcnow_iso(), description=description)
    wallet.balance += amount
    wallet.transactions.insert(0, tx)
    logger.info(f"Ledger {tx.type.value} {amount:+d} ({description}); balance={wallet.balance}")
    return tx


def deposit(wallet: Wallet, amount: int, method: PaymentMethod, minimum: int) -> Transaction:
    """Top up the wallet through an e-wallet channel; amounts below ``minimum`` are rejected."""
    if amount < minimum:
        msg = f"Minimum deposit is Rp {minimum:,}"
        logger.warning(f"Rejected deposit of {amount} via {method.value}: below minimum {minimum}")
        raise ValidationError(msg)
    return apply_transaction(wallet, TransactionType.DEPOSIT, amount, f"Deposited via {method.value}")


def ledger_total(wallet: Wallet) -> int:
    """Return the sum of every recorded transaction amount."""
    return sum(tx.amount for tx in wallet.transactions)


def is_consistent(wallet: Wallet) -> bool:
    """Check that the balance equals the sum of the recorded transactions."""
    return wallet.balance == ledger_total(wallet)
