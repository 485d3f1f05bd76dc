from dataclasses import dataclass, replace


@dataclass
class TransactionRecord:
    """Proposed outbound transfer tracked by the ledger"""
    proposer: str  # owner identity
    destination: str
    amount: int
    executed: bool = False
    num_confirmations: int = 0

    def copy(self) -> 'TransactionRecord':
        return replace(self)

    @property
    def is_pending(self) -> bool:
        return not self.executed

    def to_dict(self) -> dict:
        """Serialize record for storage/transmission"""
        return {
            'proposer': self.proposer,
            'destination': self.destination,
            'amount': self.amount,
            'executed': self.executed,
            'num_confirmations': self.num_confirmations
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'TransactionRecord':
        """Deserialize record; field types are checked, never coerced"""
        executed = data.get('executed', False)
        num_confirmations = data.get('num_confirmations', 0)

        if not isinstance(executed, bool):
            raise TypeError(f"executed must be a bool, got {executed!r}")
        if not isinstance(num_confirmations, int) or isinstance(num_confirmations, bool):
            raise TypeError(f"num_confirmations must be an int, got {num_confirmations!r}")
        if not isinstance(data['proposer'], str):
            raise TypeError(f"proposer must be a string, got {data['proposer']!r}")

        return cls(
            proposer=data['proposer'],
            destination=data['destination'],
            amount=data['amount'],
            executed=executed,
            num_confirmations=num_confirmations
        )
