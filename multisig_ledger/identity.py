"""
Owner identity utilities - addresses derived from secp256k1 keys
"""

import hashlib
from typing import List, Tuple

from ecdsa import SigningKey, SECP256k1


class OwnerKey:
    """Key pair whose public half names a wallet owner"""

    def __init__(self, private_key: bytes = None):
        if private_key:
            self.private_key = SigningKey.from_string(private_key, curve=SECP256k1)
        else:
            self.private_key = SigningKey.generate(curve=SECP256k1)

        self.public_key = self.private_key.get_verifying_key()

    def get_public_key_hex(self) -> str:
        """Get compressed public key in hex format"""
        return self.public_key.to_string("compressed").hex()

    @property
    def address(self) -> str:
        """Owner identity handed to the ledger"""
        return OwnerKey.hash160(bytes.fromhex(self.get_public_key_hex())).hex()

    @staticmethod
    def generate_key_pair() -> Tuple[str, str]:
        """Generate new key pair and return (private_key_hex, address)"""
        key = OwnerKey()
        return key.private_key.to_string().hex(), key.address

    @staticmethod
    def generate_addresses(count: int) -> List[str]:
        """Fresh owner identities, e.g. for a new wallet"""
        return [OwnerKey().address for _ in range(count)]

    @staticmethod
    def hash160(data: bytes) -> bytes:
        """HASH160-style digest; SHA256 stands in where RIPEMD160 is unavailable"""
        sha256_hash = hashlib.sha256(data).digest()
        return hashlib.sha256(sha256_hash).digest()[:20]
