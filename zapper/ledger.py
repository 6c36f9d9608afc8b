"""In-memory token ledger with all-or-nothing operation blocks.

Stands in for the host chain: balances for every (token, account) pair,
LP token supply for pools, and an atomic() block that restores balances
and registered participant state when an exception escapes it.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Protocol

import structlog

from zapper.errors import InsufficientBalance, PreconditionViolation
from zapper.models.types import normalize_address

logger = structlog.get_logger()


class Participant(Protocol):
    """Stateful object whose state is rolled back together with the ledger."""

    def snapshot(self) -> Any: ...

    def restore(self, state: Any) -> None: ...


class InMemoryLedger:
    """Token balances keyed by normalized (token, account) addresses."""

    def __init__(self) -> None:
        self._balances: defaultdict[tuple[str, str], int] = defaultdict(int)
        self._supplies: defaultdict[str, int] = defaultdict(int)
        self._participants: list[Participant] = []

    def register(self, participant: Participant) -> None:
        """Include a participant's state in atomic() rollbacks."""
        self._participants.append(participant)

    def balance_of(self, token: str, account: str) -> int:
        return self._balances.get((normalize_address(token), normalize_address(account)), 0)

    def total_supply(self, token: str) -> int:
        return self._supplies.get(normalize_address(token), 0)

    def transfer(self, token: str, sender: str, recipient: str, amount: int) -> None:
        """Move amount of token from sender to recipient.

        Raises:
            PreconditionViolation: If amount is negative
            InsufficientBalance: If sender holds less than amount
        """
        if amount < 0:
            raise PreconditionViolation(f"Negative transfer amount: {amount}")
        token_key = normalize_address(token)
        sender_key = (token_key, normalize_address(sender))
        recipient_key = (token_key, normalize_address(recipient))

        balance = self._balances[sender_key]
        if balance < amount:
            raise InsufficientBalance(
                f"{sender} holds {balance} of {token}, cannot transfer {amount}"
            )
        self._balances[sender_key] = balance - amount
        self._balances[recipient_key] += amount

    def mint(self, token: str, account: str, amount: int) -> None:
        """Create new units of token for account."""
        if amount < 0:
            raise PreconditionViolation(f"Negative mint amount: {amount}")
        token_key = normalize_address(token)
        self._balances[(token_key, normalize_address(account))] += amount
        self._supplies[token_key] += amount

    def burn(self, token: str, account: str, amount: int) -> None:
        """Destroy units of token held by account.

        Raises:
            InsufficientBalance: If account holds less than amount
        """
        token_key = normalize_address(token)
        key = (token_key, normalize_address(account))
        if self._balances[key] < amount:
            raise InsufficientBalance(
                f"{account} holds {self._balances[key]} of {token}, cannot burn {amount}"
            )
        self._balances[key] -= amount
        self._supplies[token_key] -= amount

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """Run a block as one unit: on any exception all changes are undone.

        Blocks nest; an inner failure that is caught by the caller only
        rolls back the inner block.
        """
        balances = dict(self._balances)
        supplies = dict(self._supplies)
        states = [(participant, participant.snapshot()) for participant in self._participants]
        try:
            yield
        except Exception as err:
            self._balances = defaultdict(int, balances)
            self._supplies = defaultdict(int, supplies)
            for participant, state in states:
                participant.restore(state)
            logger.warning(
                "ledger_rolled_back",
                error_type=type(err).__name__,
                error=str(err),
            )
            raise
