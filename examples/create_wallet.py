#!/usr/bin/env python3
"""
Example: Creating a multi-party wallet and saving its state
"""

import json

from multisig_ledger.ledger import AuthorizationLedger
from multisig_ledger.environment import InMemoryEnvironment
from multisig_ledger.identity import OwnerKey
from multisig_ledger.errors import ConstructionError


def main():
    print("=== Creating Multi-Party Wallet ===")
    print()

    # Too few owners is rejected before any wallet exists
    print("🚫 Trying a 3-owner wallet...")
    try:
        AuthorizationLedger(OwnerKey.generate_addresses(3))
    except ConstructionError as e:
        print(f"   Rejected: {e}")
    print()

    print("🔑 Generating keys for wallet owners...")
    owners = []
    for name in ["Alice", "Bob", "Carol", "Dave"]:
        private_hex, address = OwnerKey.generate_key_pair()
        owners.append(address)
        print(f"   {name}: {address}")
    print()

    environment = InMemoryEnvironment(initial_balance=5_000)
    ledger = AuthorizationLedger(owners, environment)

    print("📋 Wallet Rules:")
    for key, value in ledger.rules.to_dict().items():
        print(f"   {key}: {value}")
    print()

    print("🏗️  Wallet Created Successfully!")
    print(f"   Wallet ID: {ledger.wallet_id}")
    print(f"   Balance: {environment.balance():,}")
    print(f"   State Hash: {ledger.state_hash()}")
    print()

    tx_index = ledger.submit(owners[0], owners[1], 1_200)
    ledger.confirm(owners[2], tx_index)

    # Round-trip the persisted state
    saved = json.dumps(ledger.to_dict(), indent=2)
    print("💾 Saved state:")
    print(saved)
    print()

    restored = AuthorizationLedger.from_dict(json.loads(saved), environment)
    print(f"✅ Restored wallet matches: {restored.state_hash() == ledger.state_hash()}")


if __name__ == "__main__":
    main()
