"""
Notifications emitted by the ledger after an operation commits
"""

from dataclasses import dataclass, asdict
from typing import Callable, List, Optional


@dataclass(frozen=True)
class LedgerEvent:
    """Base class for ledger notifications"""

    kind = "event"

    def to_dict(self) -> dict:
        data = asdict(self)
        data['kind'] = self.kind
        return data


@dataclass(frozen=True)
class Deposited(LedgerEvent):
    sender: str
    amount: int
    balance: int

    kind = "deposit"


@dataclass(frozen=True)
class Submitted(LedgerEvent):
    owner: str
    tx_index: int
    amount: int
    balance: int  # environment balance at submission

    kind = "submit"


@dataclass(frozen=True)
class Confirmed(LedgerEvent):
    owner: str
    tx_index: int

    kind = "confirm"


@dataclass(frozen=True)
class Revoked(LedgerEvent):
    owner: str
    tx_index: int

    kind = "revoke"


@dataclass(frozen=True)
class Executed(LedgerEvent):
    owner: str
    tx_index: int

    kind = "execute"


EventListener = Callable[[LedgerEvent], None]


class EventRecorder:
    """Listener that keeps every delivered notification in order"""

    def __init__(self):
        self._events = []

    def __call__(self, event: LedgerEvent) -> None:
        self._events.append(event)

    def __len__(self) -> int:
        return len(self._events)

    def get_events(self, kind: Optional[str] = None) -> List[LedgerEvent]:
        """Get recorded events, optionally only one kind"""
        if kind is None:
            return self._events.copy()
        return [e for e in self._events if e.kind == kind]

    def clear(self) -> None:
        self._events.clear()
