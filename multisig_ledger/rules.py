from dataclasses import dataclass

from .errors import InvalidOwnerCount


@dataclass(frozen=True)
class AuthorizationRules:
    """Confirmation rules fixed for the lifetime of a ledger"""

    # Distinct owner confirmations needed before execute
    confirmation_threshold: int

    # Owner lists of this length or shorter are rejected
    owner_count_floor: int

    # Confirmation count of a freshly submitted transaction
    initial_confirmations: int

    @classmethod
    def standard(cls) -> 'AuthorizationRules':
        """Create the standard 2-confirmation rules"""
        return cls(
            confirmation_threshold=2,
            owner_count_floor=3,  # at least 4 owners
            initial_confirmations=0
        )

    def validate_owner_count(self, count: int) -> None:
        """Reject owner lists that are not longer than the floor"""
        if count <= self.owner_count_floor:
            raise InvalidOwnerCount(count, self.owner_count_floor)

    def is_executable(self, confirmations: int) -> bool:
        """Check if a confirmation count meets the threshold"""
        return confirmations >= self.confirmation_threshold

    def missing_confirmations(self, confirmations: int) -> int:
        """Number of further confirmations needed before execute"""
        return max(self.confirmation_threshold - confirmations, 0)

    def to_dict(self) -> dict:
        return {
            'confirmation_threshold': self.confirmation_threshold,
            'owner_count_floor': self.owner_count_floor,
            'initial_confirmations': self.initial_confirmations
        }
