#!/usr/bin/env python3
"""
Example: Running various transfer scenarios through the ledger
"""

from multisig_ledger.ledger import AuthorizationLedger
from multisig_ledger.environment import InMemoryEnvironment
from multisig_ledger.errors import MultisigError


def main():
    print("=== Testing Transfer Scenarios ===")
    print()

    owners = ["alice", "bob", "carol", "dave"]
    outsider = "eve"

    scenarios = [
        {
            'name': 'Two confirmations, then execute',
            'confirmers': ['bob', 'carol'],
            'executor': 'alice',
            'amount': 100,
            'should_pass': True
        },
        {
            'name': 'Single confirmation - Should fail',
            'confirmers': ['bob'],
            'executor': 'alice',
            'amount': 100,
            'should_pass': False
        },
        {
            'name': 'Outsider executes - Should fail',
            'confirmers': ['bob', 'carol'],
            'executor': outsider,
            'amount': 100,
            'should_pass': False
        },
        {
            'name': 'Amount above balance - Should fail',
            'confirmers': ['alice', 'dave'],
            'executor': 'dave',
            'amount': 1_000_000,
            'should_pass': False
        }
    ]

    for i, scenario in enumerate(scenarios, 1):
        environment = InMemoryEnvironment(initial_balance=10_000)
        ledger = AuthorizationLedger(owners, environment)

        print(f"📝 Test {i}: {scenario['name']}")
        print(f"   Amount: {scenario['amount']:,}")
        print(f"   Confirmers: {len(scenario['confirmers'])}")

        tx_index = ledger.submit('alice', 'bob', scenario['amount'])
        for owner in scenario['confirmers']:
            ledger.confirm(owner, tx_index)

        try:
            ledger.execute(scenario['executor'], tx_index)
            print(f"   ✅ Executed, balance now {environment.balance():,}")
            if scenario['should_pass']:
                print("   ✅ Expected result: PASS")
            else:
                print("   ❌ Unexpected result: Should have failed")
        except MultisigError as e:
            print(f"   ❌ Execute rejected ({type(e).__name__}): {e}")
            if not scenario['should_pass']:
                print("   ✅ Expected result: FAIL")
            else:
                print("   ❌ Unexpected result: Should have passed")

        print()

    print("🎯 Transfer testing complete!")


if __name__ == "__main__":
    main()
