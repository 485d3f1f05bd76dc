"""
Authorization ledger - owners jointly approve outbound transfers

Every public method runs under one reentrant lock for its whole duration,
including the environment's transfer call. Notifications raised while a call
is in flight are queued and only delivered once the outermost call commits.
"""

import hashlib
import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterable, List, Optional, Set, Tuple

from .environment import Environment, InMemoryEnvironment
from .errors import (
    AlreadyConfirmed,
    AlreadyExecuted,
    CorruptLedgerState,
    DuplicateOwner,
    ExecutionInProgress,
    InsufficientConfirmations,
    InvalidAmount,
    InvalidOwner,
    MultisigError,
    NotConfirmed,
    NotOwner,
    TransferFailed,
    TxNotFound,
)
from .events import (
    Confirmed,
    Deposited,
    EventListener,
    Executed,
    LedgerEvent,
    Revoked,
    Submitted,
)
from .rules import AuthorizationRules
from .transaction import TransactionRecord

logger = logging.getLogger(__name__)

WALLET_ID_TAG = b"MULTISIG_WALLET_V1"


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _update_text(hasher, value: str) -> None:
    data = str(value).encode('utf-8')
    hasher.update(len(data).to_bytes(4, 'little'))
    hasher.update(data)


class AuthorizationLedger:
    """Owner set, confirmation threshold and transaction log of one wallet"""

    def __init__(self, owners: Iterable[str], environment: Optional[Environment] = None):
        if isinstance(owners, (str, bytes)):
            raise InvalidOwner(owners)
        try:
            owners = list(owners)
        except TypeError:
            raise InvalidOwner(owners) from None
        self.rules = AuthorizationRules.standard()
        self.rules.validate_owner_count(len(owners))

        seen = set()
        for owner in owners:
            if not isinstance(owner, str):
                raise InvalidOwner(owner)
            if owner in seen:
                raise DuplicateOwner(owner)
            seen.add(owner)

        self._owners = tuple(owners)
        self._owner_set = frozenset(owners)
        self.environment = environment if environment is not None else InMemoryEnvironment()
        self.wallet_id = self._generate_wallet_id()

        self._transactions: List[TransactionRecord] = []
        self._confirmations: Dict[int, Set[str]] = {}  # tx index -> confirming owners

        self._lock = threading.RLock()
        self._listeners: List[EventListener] = []
        self._pending_events: List[LedgerEvent] = []
        self._depth = 0
        self._delivering = False
        self._executing = False  # a transfer is in flight

    def _generate_wallet_id(self) -> str:
        """Generate deterministic wallet ID from owners"""
        hasher = hashlib.sha256()
        hasher.update(WALLET_ID_TAG)

        for owner in sorted(self._owners):
            _update_text(hasher, owner)

        return hasher.hexdigest()

    @property
    def threshold(self) -> int:
        return self.rules.confirmation_threshold

    # Call scoping and notification delivery

    @contextmanager
    def _operation(self, name: str):
        with self._lock:
            self._depth += 1
            mark = len(self._pending_events)
            try:
                yield
            except BaseException as exc:
                del self._pending_events[mark:]
                if isinstance(exc, MultisigError):
                    logger.debug("Rejected %s on wallet %s: %s", name, self.wallet_id[:8], exc)
                raise
            finally:
                self._depth -= 1

            if self._depth == 0 and not self._delivering:
                self._flush_events()

    def _flush_events(self) -> None:
        # Operations started by a listener queue behind the current batch
        self._delivering = True
        try:
            while self._pending_events:
                self._notify(self._pending_events.pop(0))
        finally:
            self._delivering = False

    def _notify(self, event: LedgerEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.warning("Listener %r failed on %s event", listener, event.kind, exc_info=True)

    def _emit(self, event: LedgerEvent) -> None:
        self._pending_events.append(event)

    def subscribe(self, listener: EventListener) -> None:
        """Register a callable that receives committed notifications"""
        with self._lock:
            self._listeners.append(listener)

    def unsubscribe(self, listener: EventListener) -> None:
        with self._lock:
            self._listeners.remove(listener)

    # Lookups

    def _has_index(self, tx_index) -> bool:
        return _is_int(tx_index) and 0 <= tx_index < len(self._transactions)

    def _get_record(self, tx_index) -> TransactionRecord:
        if not self._has_index(tx_index):
            raise TxNotFound(tx_index, len(self._transactions))
        return self._transactions[tx_index]

    def _require_owner(self, caller: str) -> None:
        if not self.is_owner(caller):
            raise NotOwner(caller)

    # Snapshot and restore

    def _snapshot(self) -> Tuple[List[TransactionRecord], Dict[int, Set[str]]]:
        return (
            [tx.copy() for tx in self._transactions],
            {index: set(owners) for index, owners in self._confirmations.items()}
        )

    def _restore(self, snapshot: Tuple[List[TransactionRecord], Dict[int, Set[str]]]) -> None:
        self._transactions, self._confirmations = snapshot

    # Mutating operations

    def deposit(self, sender: str, amount: int) -> int:
        """Fund the wallet; returns the resulting balance"""
        with self._operation("deposit"):
            if not _is_int(amount) or amount <= 0:
                raise InvalidAmount(amount)

            self.environment.receive(sender, amount)
            balance = self.environment.balance()

            logger.info("Deposit of %s from %s, balance %s", amount, sender, balance)
            self._emit(Deposited(sender, amount, balance))
            return balance

    def submit(self, caller: str, destination: str, amount: int) -> int:
        """Propose a transfer; returns the new transaction index"""
        with self._operation("submit"):
            self._require_owner(caller)

            tx_index = len(self._transactions)
            self._transactions.append(TransactionRecord(
                proposer=caller,
                destination=destination,
                amount=amount,
                executed=False,
                num_confirmations=self.rules.initial_confirmations
            ))
            self._confirmations[tx_index] = set()

            balance = self.environment.balance()
            logger.info("Transaction %s submitted by %s: %s to %s", tx_index, caller, amount, destination)
            self._emit(Submitted(caller, tx_index, amount, balance))
            return tx_index

    def confirm(self, caller: str, tx_index: int) -> None:
        """Record the caller's approval of a pending transaction"""
        with self._operation("confirm"):
            tx = self._get_record(tx_index)
            self._require_owner(caller)

            if caller in self._confirmations[tx_index]:
                raise AlreadyConfirmed(tx_index, caller)
            if tx.executed:
                raise AlreadyExecuted(tx_index, caller)

            self._confirmations[tx_index].add(caller)
            tx.num_confirmations += 1

            logger.info("Transaction %s confirmed by %s (%s/%s)",
                        tx_index, caller, tx.num_confirmations, self.threshold)
            self._emit(Confirmed(caller, tx_index))

    def revoke(self, caller: str, tx_index: int) -> None:
        """Withdraw the caller's outstanding approval"""
        with self._operation("revoke"):
            tx = self._get_record(tx_index)

            if tx.executed:
                raise AlreadyExecuted(tx_index, caller)
            # Non-owners never hold a confirmation, so this also rejects them
            if not self.is_confirmed(tx_index, caller):
                raise NotConfirmed(tx_index, caller)

            self._confirmations[tx_index].discard(caller)
            tx.num_confirmations -= 1

            logger.info("Transaction %s revoked by %s (%s/%s)",
                        tx_index, caller, tx.num_confirmations, self.threshold)
            self._emit(Revoked(caller, tx_index))

    def execute(self, caller: str, tx_index: int) -> None:
        """Perform the transfer of a sufficiently confirmed transaction"""
        with self._operation("execute"):
            self._require_owner(caller)
            tx = self._get_record(tx_index)

            if tx.executed:
                raise AlreadyExecuted(tx_index, caller)
            if not self.rules.is_executable(tx.num_confirmations):
                raise InsufficientConfirmations(tx_index, tx.num_confirmations, self.threshold)
            # A rollback of the outer execute would re-arm any nested payout
            if self._executing:
                raise ExecutionInProgress(tx_index, caller)

            snapshot = self._snapshot()
            tx.executed = True

            self._executing = True
            try:
                transferred = self.environment.transfer(tx.destination, tx.amount)
            except Exception as exc:
                self._restore(snapshot)
                logger.warning("Transfer for transaction %s raised: %s", tx_index, exc)
                raise TransferFailed(tx_index, tx.destination, tx.amount) from exc
            except BaseException:
                self._restore(snapshot)
                raise
            finally:
                self._executing = False

            if not transferred:
                self._restore(snapshot)
                logger.warning("Transfer of %s to %s declined for transaction %s",
                               tx.amount, tx.destination, tx_index)
                raise TransferFailed(tx_index, tx.destination, tx.amount)

            logger.info("Transaction %s executed by %s", tx_index, caller)
            self._emit(Executed(caller, tx_index))

    # Queries

    def is_owner(self, identity: str) -> bool:
        try:
            return identity in self._owner_set
        except TypeError:
            return False

    def get_owners(self) -> List[str]:
        return list(self._owners)

    def get_transaction_count(self) -> int:
        with self._lock:
            return len(self._transactions)

    def get_transaction(self, tx_index: int) -> TransactionRecord:
        """Get a copy of the record at tx_index"""
        with self._lock:
            return self._get_record(tx_index).copy()

    def get_transactions(self) -> List[TransactionRecord]:
        with self._lock:
            return [tx.copy() for tx in self._transactions]

    def get_pending_transactions(self) -> List[Tuple[int, TransactionRecord]]:
        """Get (index, record) pairs not yet executed"""
        with self._lock:
            return [
                (index, tx.copy())
                for index, tx in enumerate(self._transactions)
                if tx.is_pending
            ]

    def is_confirmed(self, tx_index: int, owner: str) -> bool:
        """Check if owner holds a confirmation on tx_index"""
        with self._lock:
            if not self._has_index(tx_index):
                return False
            try:
                return owner in self._confirmations[tx_index]
            except TypeError:
                return False

    def get_confirmations(self, tx_index: int) -> List[str]:
        """Get owners confirming tx_index, in owner order"""
        with self._lock:
            self._get_record(tx_index)
            confirming = self._confirmations[tx_index]
            return [owner for owner in self._owners if owner in confirming]

    def state_hash(self) -> str:
        """Digest of the observable ledger state"""
        with self._lock:
            hasher = hashlib.sha256()
            hasher.update(bytes.fromhex(self.wallet_id))
            hasher.update(self.threshold.to_bytes(4, 'little'))

            for owner in self._owners:
                _update_text(hasher, owner)

            for index, tx in enumerate(self._transactions):
                hasher.update(index.to_bytes(8, 'little'))
                _update_text(hasher, tx.proposer)
                _update_text(hasher, repr(tx.destination))
                _update_text(hasher, repr(tx.amount))  # type-tagged
                hasher.update(b'\x01' if tx.executed else b'\x00')
                hasher.update(tx.num_confirmations.to_bytes(4, 'little', signed=True))

                confirming = self._confirmations[index]
                for owner in self._owners:
                    hasher.update(b'\x01' if owner in confirming else b'\x00')

            return hasher.hexdigest()

    # Persistence

    def to_dict(self) -> dict:
        """Serialize ledger state"""
        with self._lock:
            transactions = []
            for index, tx in enumerate(self._transactions):
                data = tx.to_dict()
                data['confirmations'] = self.get_confirmations(index)
                transactions.append(data)

            return {
                'wallet_id': self.wallet_id,
                'owners': list(self._owners),
                'threshold': self.threshold,
                'transactions': transactions
            }

    @classmethod
    def from_dict(cls, data: dict, environment: Optional[Environment] = None) -> 'AuthorizationLedger':
        """Rebuild a ledger from to_dict() output"""
        try:
            ledger = cls(data['owners'], environment)
            threshold = data.get('threshold', ledger.threshold)
            wallet_id = data.get('wallet_id', ledger.wallet_id)
            stored = data.get('transactions', [])
        except KeyError as exc:
            raise CorruptLedgerState(f"Missing field {exc}") from exc

        if threshold != ledger.threshold:
            raise CorruptLedgerState(f"Threshold {threshold} does not match {ledger.threshold}")
        if wallet_id != ledger.wallet_id:
            raise CorruptLedgerState("Wallet id does not match owners")

        for index, tx_data in enumerate(stored):
            try:
                tx = TransactionRecord.from_dict(tx_data)
                confirming = list(tx_data.get('confirmations', []))
            except (KeyError, TypeError) as exc:
                raise CorruptLedgerState(f"Transaction {index} is malformed: {exc}") from exc

            if not ledger.is_owner(tx.proposer):
                raise CorruptLedgerState(f"Transaction {index} proposer {tx.proposer} is not an owner")
            for owner in confirming:
                if not ledger.is_owner(owner):
                    raise CorruptLedgerState(f"Transaction {index} confirmed by non-owner {owner}")
            if len(set(confirming)) != len(confirming):
                raise CorruptLedgerState(f"Transaction {index} has duplicate confirmations")
            if tx.num_confirmations != len(confirming):
                raise CorruptLedgerState(
                    f"Transaction {index} counts {tx.num_confirmations} confirmations, "
                    f"lists {len(confirming)}"
                )
            if tx.executed and not ledger.rules.is_executable(tx.num_confirmations):
                raise CorruptLedgerState(f"Transaction {index} executed below threshold")

            ledger._transactions.append(tx)
            ledger._confirmations[index] = set(confirming)

        return ledger
