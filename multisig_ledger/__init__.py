"""
Multi-party authorization ledger - owners jointly approve outbound transfers
"""

from .ledger import AuthorizationLedger
from .rules import AuthorizationRules
from .transaction import TransactionRecord
from .environment import Environment, InMemoryEnvironment
from .events import (
    Confirmed,
    Deposited,
    EventRecorder,
    Executed,
    LedgerEvent,
    Revoked,
    Submitted,
)
from .errors import (
    AlreadyConfirmed,
    AlreadyExecuted,
    CorruptLedgerState,
    DuplicateOwner,
    ExecutionInProgress,
    InvalidOwner,
    InsufficientConfirmations,
    InvalidAmount,
    InvalidOwnerCount,
    MultisigError,
    NotConfirmed,
    NotOwner,
    TransferFailed,
    TxNotFound,
)

__version__ = "0.1.0"
__all__ = [
    "AuthorizationLedger",
    "AuthorizationRules",
    "TransactionRecord",
    "Environment",
    "InMemoryEnvironment",
    "LedgerEvent",
    "Deposited",
    "Submitted",
    "Confirmed",
    "Revoked",
    "Executed",
    "EventRecorder",
    "MultisigError",
    "InvalidOwnerCount",
    "DuplicateOwner",
    "InvalidOwner",
    "ExecutionInProgress",
    "CorruptLedgerState",
    "InvalidAmount",
    "NotOwner",
    "TxNotFound",
    "AlreadyConfirmed",
    "NotConfirmed",
    "AlreadyExecuted",
    "InsufficientConfirmations",
    "TransferFailed"
]
