#!/usr/bin/env python3
"""
Complete demo of the multi-party authorization ledger
"""

from multisig_ledger.ledger import AuthorizationLedger
from multisig_ledger.environment import InMemoryEnvironment
from multisig_ledger.events import EventRecorder
from multisig_ledger.identity import OwnerKey
from multisig_ledger.errors import MultisigError


def main():
    print("=" * 60)
    print("🏦 MULTI-PARTY AUTHORIZATION LEDGER - COMPLETE DEMO")
    print("=" * 60)
    print()

    # Step 1: Setup
    print("🔧 STEP 1: Setting up wallet owners")
    print("-" * 40)

    participants = []
    for name in ["Alice", "Bob", "Carol", "Dave"]:
        private_hex, address = OwnerKey.generate_key_pair()
        participants.append({'name': name, 'private_key': private_hex, 'address': address})
        print(f"✅ {name}: {address[:16]}...")

    names = {p['address']: p['name'] for p in participants}
    alice, bob, carol, dave = (p['address'] for p in participants)
    print()

    # Step 2: Create wallet
    print("🏗️  STEP 2: Creating the wallet")
    print("-" * 40)

    environment = InMemoryEnvironment()
    ledger = AuthorizationLedger([p['address'] for p in participants], environment)
    recorder = EventRecorder()
    ledger.subscribe(recorder)

    ledger.deposit(alice, 1_000)

    print(f"✅ Wallet ID: {ledger.wallet_id}")
    print(f"✅ Balance: {environment.balance():,}")
    print(f"✅ Rules: {ledger.threshold}-of-{len(ledger.get_owners())} confirmations required")
    print()

    # Step 3: Submit and confirm
    print("📝 STEP 3: Submitting and confirming a transfer")
    print("-" * 40)

    tx_index = ledger.submit(alice, bob, 100)
    print(f"✅ Alice proposed transaction {tx_index}: 100 to Bob")

    try:
        ledger.execute(alice, tx_index)
        print("   ❌ UNEXPECTED: Should have failed")
    except MultisigError as e:
        print(f"   ✅ EXPECTED FAILURE: {e}")

    for owner in (bob, carol):
        ledger.confirm(owner, tx_index)
        tx = ledger.get_transaction(tx_index)
        print(f"✅ {names[owner]} confirmed ({tx.num_confirmations}/{ledger.threshold})")
    print()

    # Step 4: Revoke and reconfirm
    print("↩️  STEP 4: Revoking a confirmation")
    print("-" * 40)

    ledger.revoke(carol, tx_index)
    print(f"✅ Carol revoked: confirmed by {[names[o] for o in ledger.get_confirmations(tx_index)]}")
    ledger.confirm(dave, tx_index)
    print(f"✅ Dave confirmed: confirmed by {[names[o] for o in ledger.get_confirmations(tx_index)]}")
    print()

    # Step 5: Execute
    print("💸 STEP 5: Executing the transfer")
    print("-" * 40)

    ledger.execute(alice, tx_index)
    print(f"✅ Executed: Bob received {environment.received_by(bob):,}")
    print(f"💰 Remaining balance: {environment.balance():,}")

    try:
        ledger.execute(alice, tx_index)
        print("   ❌ UNEXPECTED: Should have failed")
    except MultisigError as e:
        print(f"   ✅ EXPECTED FAILURE on repeat: {e}")
    print()

    # Step 6: Failed transfer and retry
    print("🔁 STEP 6: Transfer failure and retry")
    print("-" * 40)

    tx_index = ledger.submit(bob, carol, 250)
    ledger.confirm(alice, tx_index)
    ledger.confirm(bob, tx_index)

    environment.reject_destination(carol)
    state_before = ledger.state_hash()
    try:
        ledger.execute(bob, tx_index)
    except MultisigError as e:
        print(f"   ✅ EXPECTED FAILURE: {e}")
    print(f"   State unchanged: {ledger.state_hash() == state_before}")

    environment.accept_destination(carol)
    ledger.execute(bob, tx_index)
    print(f"✅ Retry succeeded: Carol received {environment.received_by(carol):,}")
    print()

    # Step 7: Summary
    print("📈 STEP 7: Summary")
    print("-" * 40)

    print(f"   Wallet balance: {environment.balance():,}")
    print(f"   Transactions submitted: {ledger.get_transaction_count()}")
    print(f"   Transfers completed: {len(environment.get_transfer_history())}")
    print(f"   Notifications delivered: {len(recorder)}")
    for event in recorder.get_events():
        print(f"      {event.kind}: {event.to_dict()}")
    print()

    print("🎯 Demo completed successfully!")


if __name__ == "__main__":
    main()
