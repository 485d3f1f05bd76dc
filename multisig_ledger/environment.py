"""
Execution environment - holds the wallet balance and moves value out of it
"""

from typing import Any, Dict, List, Protocol, Set


class Environment(Protocol):
    """Capability surface the ledger consumes"""

    def balance(self) -> int:
        ...

    def receive(self, sender: str, amount: int) -> None:
        ...

    def transfer(self, destination: str, amount: int) -> bool:
        ...


class InMemoryEnvironment:
    """Reference environment keeping balances in process memory"""

    def __init__(self, initial_balance: int = 0):
        if initial_balance < 0:
            raise ValueError(f"Initial balance must not be negative, got {initial_balance}")
        self._balance = initial_balance
        self._credits = {}  # destination -> amount received
        self._rejected = set()  # destinations that refuse transfers
        self._transfer_history = []

    def balance(self) -> int:
        return self._balance

    def receive(self, sender: str, amount: int) -> None:
        """Credit the wallet balance"""
        self._balance += amount

    def transfer(self, destination: str, amount: int) -> bool:
        """Move value from the wallet to destination"""

        if amount < 0:
            return False

        if destination in self._rejected:
            return False

        if self._balance < amount:
            return False

        # Execute transfer
        self._balance -= amount
        self._credits[destination] = self.received_by(destination) + amount

        self._transfer_history.append({
            'to': destination,
            'amount': amount,
            'sequence': len(self._transfer_history)
        })

        return True

    def received_by(self, destination: str) -> int:
        """Total value transferred to destination"""
        return self._credits.get(destination, 0)

    def reject_destination(self, destination: str) -> None:
        """Make every transfer to destination fail"""
        self._rejected.add(destination)

    def accept_destination(self, destination: str) -> None:
        self._rejected.discard(destination)

    @property
    def rejected_destinations(self) -> Set[str]:
        return set(self._rejected)

    def get_transfer_history(self) -> List[Dict[str, Any]]:
        """Get completed transfers"""
        return self._transfer_history.copy()
