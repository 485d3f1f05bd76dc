"""
Exception types raised by the authorization ledger
"""

from typing import Optional


class MultisigError(Exception):
    """Base exception for all ledger errors"""


# Construction

class ConstructionError(MultisigError, ValueError):
    """Raised when a ledger cannot be built from the given input"""


class InvalidOwnerCount(ConstructionError):
    """Raised when the owner list is too short"""

    def __init__(self, count: int, floor: int):
        super().__init__(f"Owner count must be greater than {floor}, got {count}")
        self.count = count
        self.floor = floor


class DuplicateOwner(ConstructionError):
    """Raised when an identity appears twice in the owner list"""

    def __init__(self, owner: str):
        super().__init__(f"Duplicate owner {owner}")
        self.owner = owner


class InvalidOwner(ConstructionError):
    """Raised when the owner list or one of its identities is not a string"""

    def __init__(self, owner):
        super().__init__(f"Owner identities must be strings, got {owner!r}")
        self.owner = owner


class CorruptLedgerState(ConstructionError):
    """Raised when serialized ledger state fails its consistency checks"""


class InvalidAmount(MultisigError, ValueError):
    """Raised when a deposit amount is not a positive integer"""

    def __init__(self, amount):
        super().__init__(f"Amount must be a positive integer, got {amount!r}")
        self.amount = amount


# Authorization

class AuthorizationError(MultisigError):
    """Raised when the caller lacks permission"""


class NotOwner(AuthorizationError):
    """Raised when a non-owner invokes an owner-only operation"""

    def __init__(self, caller: str):
        super().__init__(f"Caller {caller} is not an owner")
        self.caller = caller


# Reference

class TxNotFound(MultisigError, LookupError):
    """Raised when a transaction index is outside the log"""

    def __init__(self, tx_index, count: int):
        super().__init__(f"Transaction {tx_index!r} does not exist ({count} submitted)")
        self.tx_index = tx_index
        self.count = count


# State conflicts

class StateConflict(MultisigError):
    """Raised when an operation is invalid for the record's current state"""

    def __init__(self, message: str, tx_index: int, caller: Optional[str] = None):
        super().__init__(message)
        self.tx_index = tx_index
        self.caller = caller


class AlreadyConfirmed(StateConflict):
    def __init__(self, tx_index: int, caller: str):
        super().__init__(f"Transaction {tx_index} already confirmed by {caller}", tx_index, caller)


class NotConfirmed(StateConflict):
    def __init__(self, tx_index: int, caller: str):
        super().__init__(f"Transaction {tx_index} not confirmed by {caller}", tx_index, caller)


class AlreadyExecuted(StateConflict):
    def __init__(self, tx_index: int, caller: Optional[str] = None):
        super().__init__(f"Transaction {tx_index} already executed", tx_index, caller)


class ExecutionInProgress(StateConflict):
    """Raised when execute is called from inside another execute's transfer"""

    def __init__(self, tx_index: int, caller: Optional[str] = None):
        super().__init__(
            f"Transaction {tx_index} cannot execute while another transfer is in flight",
            tx_index, caller
        )


# Policy

class PolicyViolation(MultisigError):
    """Raised when the confirmation policy forbids an operation"""


class InsufficientConfirmations(PolicyViolation):
    """Raised when execute is attempted below the threshold"""

    def __init__(self, tx_index: int, confirmations: int, threshold: int):
        super().__init__(
            f"Transaction {tx_index} has {confirmations} confirmations, needs {threshold}"
        )
        self.tx_index = tx_index
        self.confirmations = confirmations
        self.threshold = threshold


# Collaborator

class CollaboratorError(MultisigError):
    """Raised when the execution environment fails"""


class TransferFailed(CollaboratorError):
    """Raised when the environment declines a transfer; execute may be retried"""

    def __init__(self, tx_index: int, destination: str, amount: int):
        super().__init__(f"Transfer of {amount} to {destination} failed for transaction {tx_index}")
        self.tx_index = tx_index
        self.destination = destination
        self.amount = amount
